from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session
from app.core.config import settings
from app.db.session import get_db
from app.schemas.stats import DriverPositionStatsOut
from app.services.stats import driver_position_stats

router = APIRouter(prefix="/stats", tags=["Stats"])


@router.get("/drivers/position/{position}", response_model=list[DriverPositionStatsOut])
def get_driver_position_stats(
    position: int = Path(ge=1, le=20),
    season_year: int | None = None,
    db: Session = Depends(get_db),
):
    """Pilotos que más veces han terminado en esa posición esta temporada."""
    return driver_position_stats(db, season_year or settings.CURRENT_SEASON_YEAR, position)
