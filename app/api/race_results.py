from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session
from app.core.config import settings
from app.db.session import get_db
from app.schemas.prediction import EventType
from app.schemas.race import RaceResultOut
from app.services.race_scoring import get_race_result

router = APIRouter(prefix="/results", tags=["Race Results"])

def result_to_out(result) -> RaceResultOut:
    return RaceResultOut(
        id=result.id,
        season_year=result.season_year,
        week_number=result.week_number,
        event_type=result.event_type,
        positions={p.position: p.driver_id for p in result.positions},
    )

@router.get("/{week_number}", response_model=RaceResultOut)
def get_race_result_for_week(
    week_number: int,
    event_type: EventType = "race",
    season_year: int | None = None,
    db: Session = Depends(get_db),
):
    result = get_race_result(db, season_year or settings.CURRENT_SEASON_YEAR, week_number, event_type)

    if not result:
        raise HTTPException(status_code=404, detail="Resultados no disponibles aún")

    return result_to_out(result)
