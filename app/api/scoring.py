from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.deps import require_admin
from app.db.session import get_db
from app.schemas.prediction import EventType
from app.services.race_scoring import score_event

router = APIRouter(prefix="/admin/scoring", tags=["Scoring"])

@router.post("/{week_number}")
def rescore_week(
    week_number: int,
    event_type: EventType = "race",
    season_year: int | None = None,
    league_id: int | None = None,
    db: Session = Depends(get_db),
    current_user = Depends(require_admin),
):
    """Recalcula los puntos de un evento (todas las ligas o solo una)."""
    summary = score_event(
        db,
        season_year or settings.CURRENT_SEASON_YEAR,
        week_number,
        event_type,
        league_id=league_id,
    )

    return {
        "message": "Puntuaciones calculadas",
        "week_number": summary.week_number,
        "event_type": summary.event_type,
        "leagues_scored": summary.leagues_scored,
        "predictions_scored": summary.predictions_scored,
        "total_points": summary.total_points,
    }
