"""
Historial de actividad de cada liga: picks nuevos o cambiados, altas de
miembros y resultados procesados. Las funciones añaden a la sesión; el
commit lo hace quien las llama junto con el cambio que registran.
"""
import logging

from sqlalchemy.orm import Session, joinedload

from app.db.models.league import League
from app.db.models.league_activity import LeagueActivity

logger = logging.getLogger(__name__)

PICK_CREATED = "pick_created"
PICK_CHANGED = "pick_changed"
USER_JOINED = "user_joined"
RACE_RESULT_PROCESSED = "race_result_processed"


def record_activity(db: Session, league_id: int, activity_type: str, **fields) -> LeagueActivity:
    activity = LeagueActivity(league_id=league_id, activity_type=activity_type, **fields)
    db.add(activity)
    return activity


def record_pick(db: Session, prediction, previous_driver_id: int | None = None):
    """Sin piloto anterior es un pick nuevo; con el mismo piloto no se registra nada."""
    if previous_driver_id == prediction.driver_id:
        return None

    return record_activity(
        db,
        prediction.league_id,
        PICK_CHANGED if previous_driver_id else PICK_CREATED,
        user_id=prediction.user_id,
        week_number=prediction.week_number,
        event_type=prediction.event_type,
        position=prediction.position,
        driver_id=prediction.driver_id,
        previous_driver_id=previous_driver_id,
    )


def record_race_result(db: Session, race, race_result) -> int:
    """
    Una entrada por liga activa de la temporada y posición obligatoria,
    con el piloto que terminó en esa posición.
    """
    by_position = {rp.position: rp.driver_id for rp in race_result.positions}
    leagues = (
        db.query(League)
        .filter(League.season_year == race_result.season_year, League.is_active.is_(True))
        .all()
    )

    created = 0
    for league in leagues:
        for position in league.required_positions:
            record_activity(
                db,
                league.id,
                RACE_RESULT_PROCESSED,
                week_number=race_result.week_number,
                event_type=race_result.event_type,
                position=position,
                driver_id=by_position.get(position),
                race_name=race.name,
            )
            created += 1

    logger.debug("Actividad de resultado: %s entradas en %s ligas", created, len(leagues))
    return created


def league_activity(db: Session, league_id: int, limit: int = 20, offset: int = 0) -> list[LeagueActivity]:
    """Más reciente primero."""
    return (
        db.query(LeagueActivity)
        .options(
            joinedload(LeagueActivity.user),
            joinedload(LeagueActivity.driver),
            joinedload(LeagueActivity.previous_driver),
        )
        .filter(LeagueActivity.league_id == league_id)
        .order_by(LeagueActivity.created_at.desc(), LeagueActivity.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
