"""
Estadísticas de picks ya puntuados: por usuario, por liga, por mes y globales.
"""
from dataclasses import dataclass
from typing import Iterable

from sqlalchemy.orm import Session

from app.db.models.f1_race import F1Race
from app.db.models.league import League
from app.db.models.prediction import Prediction
from app.db.models.race_result import RaceResult
from app.db.models.user import User


@dataclass
class PickSummary:
    total_picks: int = 0
    correct_picks: int = 0
    total_points: int = 0
    average_points: float = 0.0
    accuracy: float = 0.0  # % de aciertos exactos
    average_distance: float | None = None


def summarize(predictions: Iterable) -> PickSummary:
    """Solo cuentan las predicciones puntuadas. Media de puntos por pick."""
    summary = PickSummary()
    distances = []

    for p in predictions:
        if not p.is_scored:
            continue
        summary.total_picks += 1
        summary.total_points += p.points or 0
        if p.position_difference == 0:
            summary.correct_picks += 1
        if p.position_difference is not None:
            distances.append(p.position_difference)

    if summary.total_picks:
        summary.average_points = round(summary.total_points / summary.total_picks, 2)
        summary.accuracy = round(summary.correct_picks / summary.total_picks * 100, 1)
    if distances:
        summary.average_distance = round(sum(distances) / len(distances), 2)
    return summary


def _scored(db: Session):
    return db.query(Prediction).filter(Prediction.is_scored.is_(True))


def user_stats(db: Session, user_id: int) -> PickSummary:
    return summarize(_scored(db).filter(Prediction.user_id == user_id).all())


def global_stats(db: Session) -> dict:
    summary = summarize(_scored(db).all())
    return {
        "total_users": db.query(User).count(),
        "total_leagues": db.query(League).filter(League.is_active.is_(True)).count(),
        "total_picks": summary.total_picks,
        "correct_picks": summary.correct_picks,
        "accuracy": summary.accuracy,
        "average_points": summary.average_points,
        "average_distance_from_target": summary.average_distance,
    }


def monthly_stats(db: Session, user_id: int) -> list[dict]:
    """Picks del usuario agrupados por el mes de la carrera ("2025-03")."""
    rows = (
        _scored(db)
        .join(League, League.id == Prediction.league_id)
        .join(
            F1Race,
            (F1Race.season_year == League.season_year) & (F1Race.week_number == Prediction.week_number),
        )
        .filter(Prediction.user_id == user_id)
        .with_entities(Prediction, F1Race.race_datetime)
        .all()
    )

    by_month = {}
    for prediction, race_datetime in rows:
        by_month.setdefault(race_datetime.strftime("%Y-%m"), []).append(prediction)

    months = []
    for month in sorted(by_month):
        summary = summarize(by_month[month])
        months.append({
            "month": month,
            "total_picks": summary.total_picks,
            "correct_picks": summary.correct_picks,
            "total_points": summary.total_points,
            "accuracy": summary.accuracy,
        })
    return months


def league_stats(db: Session, league: League) -> dict:
    """Solo cuentan las posiciones que la liga pide ahora."""
    predictions = (
        _scored(db)
        .filter(
            Prediction.league_id == league.id,
            Prediction.position.in_(list(league.required_positions)),
        )
        .all()
    )
    summary = summarize(predictions)
    return {
        "league_id": league.id,
        "member_count": len(league.members),
        "races_scored": len({(p.week_number, p.event_type) for p in predictions}),
        "total_picks": summary.total_picks,
        "correct_picks": summary.correct_picks,
        "overall_accuracy": summary.accuracy,
        "average_points": summary.average_points,
        "average_distance": summary.average_distance,
    }


def driver_position_stats(db: Session, season_year: int, position: int) -> list[dict]:
    """Cuántas veces ha terminado cada piloto en `position` durante la temporada."""
    results = (
        db.query(RaceResult)
        .filter(RaceResult.season_year == season_year)
        .all()
    )
    total_races = len(results)

    counts = {}
    drivers = {}
    for result in results:
        for rp in result.positions:
            if rp.position == position:
                counts[rp.driver_id] = counts.get(rp.driver_id, 0) + 1
                drivers[rp.driver_id] = rp.driver

    stats = [
        {
            "driver_id": driver_id,
            "driver_name": drivers[driver_id].name,
            "driver_team": drivers[driver_id].team,
            "times_in_position": times,
            "total_races": total_races,
            "percentage_in_position": round(times / total_races * 100, 1),
        }
        for driver_id, times in counts.items()
    ]
    stats.sort(key=lambda s: (-s["times_in_position"], s["driver_name"]))
    return stats
