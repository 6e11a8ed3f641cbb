from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.dates import utcnow
from app.db.session import get_db
from app.db.models.f1_race import F1Race
from app.schemas.race import F1RaceOut

router = APIRouter(prefix="/races", tags=["F1 Races"])

@router.get("/", response_model=list[F1RaceOut])
def list_races(season_year: int | None = None, db: Session = Depends(get_db)):
    season_year = season_year or settings.CURRENT_SEASON_YEAR
    return (
        db.query(F1Race)
        .filter(F1Race.season_year == season_year)
        .order_by(F1Race.week_number)
        .all()
    )

@router.get("/current", response_model=F1RaceOut)
def get_current_race(season_year: int | None = None, db: Session = Depends(get_db)):
    """Siguiente carrera que aún no se ha disputado"""
    season_year = season_year or settings.CURRENT_SEASON_YEAR
    race = (
        db.query(F1Race)
        .filter(
            F1Race.season_year == season_year,
            F1Race.race_datetime >= utcnow(),
        )
        .order_by(F1Race.week_number)
        .first()
    )
    if not race:
        raise HTTPException(status_code=404, detail="No quedan carreras esta temporada")
    return race

@router.get("/week/{week_number}", response_model=F1RaceOut)
def get_race_by_week(week_number: int, season_year: int | None = None, db: Session = Depends(get_db)):
    race = get_race_or_404(db, season_year or settings.CURRENT_SEASON_YEAR, week_number)
    return race

def get_race_or_404(db: Session, season_year: int, week_number: int) -> F1Race:
    race = (
        db.query(F1Race)
        .filter(
            F1Race.season_year == season_year,
            F1Race.week_number == week_number,
        )
        .first()
    )
    if not race:
        raise HTTPException(status_code=404, detail="Carrera no encontrada")
    return race
