import logging
from dataclasses import dataclass, field

from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import RaceResultNotFoundError
from app.db.models.league import League
from app.db.models.prediction import Prediction
from app.db.models.race_result import RaceResult
from app.services.picks import ensure_result_matches
from app.services.scoring import score_position

logger = logging.getLogger(__name__)


@dataclass
class ScoringSummary:
    season_year: int
    week_number: int
    event_type: str
    leagues_scored: list[int] = field(default_factory=list)
    predictions_scored: int = 0
    total_points: int = 0


def get_race_result(db: Session, season_year: int, week_number: int, event_type: str = "race"):
    return (
        db.query(RaceResult)
        .options(joinedload(RaceResult.positions))
        .filter(
            RaceResult.season_year == season_year,
            RaceResult.week_number == week_number,
            RaceResult.event_type == event_type,
        )
        .first()
    )


def apply_scores(predictions, race_result) -> int:
    """
    Escribe puntos y diferencia en cada predicción (sin hacer commit).
    Todas deben ser del mismo evento que el resultado. Devuelve los puntos repartidos.
    """
    ensure_result_matches(predictions, race_result)

    # El resultado es el mismo para todas las ligas
    race_positions = list(race_result.positions)

    total = 0
    for prediction in predictions:
        score = score_position(prediction, race_positions)
        prediction.points = score.points
        prediction.position_difference = score.position_difference
        prediction.is_scored = True
        total += score.points
    return total


def score_event(
    db: Session,
    season_year: int,
    week_number: int,
    event_type: str = "race",
    league_id: int | None = None,
) -> ScoringSummary:
    """
    Puntúa todas las predicciones de un evento (o solo las de una liga)
    contra el resultado oficial y guarda los puntos.

    Se puede repetir las veces que haga falta: mismas entradas, mismos puntos.
    """
    race_result = get_race_result(db, season_year, week_number, event_type)
    if not race_result:
        raise RaceResultNotFoundError(week_number, event_type)

    query = (
        db.query(Prediction)
        .join(League, League.id == Prediction.league_id)
        .filter(
            League.season_year == season_year,
            Prediction.week_number == week_number,
            Prediction.event_type == event_type,
        )
    )
    if league_id is not None:
        query = query.filter(Prediction.league_id == league_id)

    predictions = query.all()

    summary = ScoringSummary(season_year, week_number, event_type)
    summary.total_points = apply_scores(predictions, race_result)
    summary.predictions_scored = len(predictions)
    summary.leagues_scored = sorted({p.league_id for p in predictions})

    db.commit()

    logger.info(
        "Puntuada semana %s (%s) temporada %s: %s predicciones en %s ligas, %s puntos",
        week_number, event_type, season_year,
        summary.predictions_scored, len(summary.leagues_scored), summary.total_points,
    )
    return summary
