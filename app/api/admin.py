import logging

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session, joinedload
from app.api.race_results import result_to_out
from app.api.races import get_race_or_404
from app.core.config import settings
from app.core.deps import require_admin
from app.db.session import get_db
from app.db.models.driver import Driver
from app.db.models.f1_race import F1Race
from app.db.models.league import League
from app.db.models.prediction import Prediction
from app.db.models.race_position import RacePosition
from app.db.models.race_result import RaceResult
from app.db.models.user import User
from app.schemas.prediction import EventType
from app.schemas.race import DriverCreate, DriverOut, F1RaceCreate, F1RaceOut, RaceResultIn
from app.schemas.user import UserOut
from app.services.activity import record_race_result
from app.services.picks import ensure_event_available, validate_result_positions
from app.services.race_scoring import get_race_result, score_event

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


# -----------------------
# Usuarios
# -----------------------
@router.get("/users", response_model=list[UserOut])
def list_users(db: Session = Depends(get_db), current_user = Depends(require_admin)):
    return db.query(User).order_by(User.id).all()


# -----------------------
# Pilotos
# -----------------------
@router.post("/drivers", response_model=DriverOut, status_code=201)
def create_driver(data: DriverCreate, db: Session = Depends(get_db), current_user = Depends(require_admin)):
    existing = (
        db.query(Driver)
        .filter(Driver.driver_number == data.driver_number, Driver.is_active.is_(True))
        .first()
    )
    if existing:
        raise HTTPException(400, f"Ya hay un piloto activo con el número {data.driver_number}")

    driver = Driver(**data.model_dump())
    db.add(driver)
    db.commit()
    db.refresh(driver)
    return driver


# -----------------------
# Carreras
# -----------------------
@router.post("/races", response_model=F1RaceOut, status_code=201)
def create_race(data: F1RaceCreate, db: Session = Depends(get_db), current_user = Depends(require_admin)):
    existing = (
        db.query(F1Race)
        .filter(F1Race.season_year == data.season_year, F1Race.week_number == data.week_number)
        .first()
    )
    if existing:
        raise HTTPException(400, "Ya existe una carrera para esa semana")
    if data.qualifying_datetime >= data.race_datetime:
        raise HTTPException(400, "La clasificación debe ser anterior a la carrera")

    race = F1Race(**data.model_dump())
    db.add(race)
    db.commit()
    db.refresh(race)
    return race

@router.get("/races/status")
def get_races_with_result_status(
    season_year: int | None = None,
    db: Session = Depends(get_db),
    current_user = Depends(require_admin),
):
    season_year = season_year or settings.CURRENT_SEASON_YEAR
    races = (
        db.query(F1Race)
        .filter(F1Race.season_year == season_year)
        .order_by(F1Race.week_number)
        .all()
    )
    entered = {
        (r.week_number, r.event_type)
        for r in db.query(RaceResult).filter(RaceResult.season_year == season_year).all()
    }

    return [
        {
            "id": race.id,
            "week_number": race.week_number,
            "name": race.name,
            "race_datetime": race.race_datetime,
            "has_sprint": race.has_sprint,
            "has_results": (race.week_number, "race") in entered,
            "has_sprint_results": (race.week_number, "sprint") in entered,
        }
        for race in races
    ]


# -----------------------
# Resultados
# -----------------------
@router.post("/results/{week_number}")
def upsert_race_result(
    week_number: int,
    data: RaceResultIn,
    db: Session = Depends(get_db),
    current_user = Depends(require_admin),
):
    season_year = data.season_year or settings.CURRENT_SEASON_YEAR
    race = get_race_or_404(db, season_year, week_number)
    ensure_event_available(race, data.event_type)

    entries = [(r.position, r.driver_id) for r in data.results]
    validate_result_positions(entries)

    driver_ids = [driver_id for _, driver_id in entries]
    if db.query(Driver).filter(Driver.id.in_(driver_ids)).count() != len(driver_ids):
        raise HTTPException(404, "Piloto no encontrado")

    # Comprobar si ya hay resultado
    result = get_race_result(db, season_year, week_number, data.event_type)
    if not result:
        result = RaceResult(season_year=season_year, week_number=week_number, event_type=data.event_type)
        db.add(result)
        db.flush()

    # Borrar posiciones anteriores (corrección del resultado)
    db.query(RacePosition).filter(RacePosition.race_result_id == result.id).delete()
    db.flush()
    db.expire(result, ["positions"])

    for position, driver_id in entries:
        db.add(RacePosition(race_result_id=result.id, position=position, driver_id=driver_id))

    db.commit()
    logger.info(
        "Resultado guardado: temporada %s semana %s (%s), %s posiciones",
        season_year, week_number, data.event_type, len(entries),
    )

    # -------------------------
    # 🔥 Calcular puntuaciones automáticamente
    # -------------------------
    summary = score_event(db, season_year, week_number, data.event_type)
    db.refresh(result)
    record_race_result(db, race, result)
    db.commit()

    return {
        "message": "Resultado guardado y puntuaciones calculadas automáticamente",
        "result": result_to_out(result),
        "predictions_scored": summary.predictions_scored,
        "leagues_scored": summary.leagues_scored,
    }


# -----------------------
# Picks pendientes
# -----------------------
@router.get("/picks/missing/{week_number}")
def get_users_without_picks(
    week_number: int,
    season_year: int | None = None,
    db: Session = Depends(get_db),
    current_user = Depends(require_admin),
):
    """Miembros de cada liga a los que les falta algún pick de la semana."""
    season_year = season_year or settings.CURRENT_SEASON_YEAR
    race = get_race_or_404(db, season_year, week_number)
    event_types: list[EventType] = ["race", "sprint"] if race.has_sprint else ["race"]

    leagues = (
        db.query(League)
        .options(joinedload(League.members))
        .filter(League.season_year == season_year, League.is_active.is_(True))
        .all()
    )
    picks = (
        db.query(Prediction)
        .join(League, League.id == Prediction.league_id)
        .filter(League.season_year == season_year, Prediction.week_number == week_number)
        .all()
    )
    made = {}
    for p in picks:
        made.setdefault((p.league_id, p.user_id, p.event_type), set()).add(p.position)

    users = {}
    for league in leagues:
        required = set(league.required_positions)
        for member in league.members:
            missing = [
                event_type for event_type in event_types
                if not required <= made.get((league.id, member.user_id, event_type), set())
            ]
            if not missing:
                continue

            entry = users.setdefault(member.user_id, {"user_id": member.user_id, "leagues": []})
            entry["leagues"].append({
                "league_id": league.id,
                "league_name": league.name,
                "required_positions": sorted(required),
                "missing_event_type": missing[0] if len(missing) == 1 else "both",
            })

    if users:
        for user in db.query(User).filter(User.id.in_(list(users))).all():
            users[user.id]["user_name"] = user.name
            users[user.id]["user_email"] = user.email

    return sorted(users.values(), key=lambda u: u["user_id"])
