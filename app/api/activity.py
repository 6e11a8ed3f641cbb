from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.api.leagues import require_member
from app.core.deps import get_current_user
from app.db.session import get_db
from app.db.models.league_activity import LeagueActivity
from app.db.models.user import User
from app.schemas.activity import ActivityOut
from app.services.activity import league_activity

router = APIRouter(prefix="/activity", tags=["Activity"])


def activity_to_out(a: LeagueActivity) -> ActivityOut:
    return ActivityOut(
        id=a.id,
        league_id=a.league_id,
        user_id=a.user_id,
        user_name=a.user.name if a.user else None,
        activity_type=a.activity_type,
        week_number=a.week_number,
        event_type=a.event_type,
        position=a.position,
        driver_id=a.driver_id,
        driver_name=a.driver.name if a.driver else None,
        driver_team=a.driver.team if a.driver else None,
        previous_driver_id=a.previous_driver_id,
        previous_driver_name=a.previous_driver.name if a.previous_driver else None,
        previous_driver_team=a.previous_driver.team if a.previous_driver else None,
        race_name=a.race_name,
        created_at=a.created_at,
    )


@router.get("/league/{league_id}", response_model=list[ActivityOut])
def get_league_activity(
    league_id: int,
    limit: int = Query(20, ge=1, le=100),
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Historial completo, paginado."""
    require_member(db, league_id, current_user)
    activities = league_activity(db, league_id, limit=limit, offset=(page - 1) * limit)
    return [activity_to_out(a) for a in activities]


@router.get("/league/{league_id}/recent", response_model=list[ActivityOut])
def get_recent_activity(
    league_id: int,
    limit: int = Query(10, ge=1, le=50),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    require_member(db, league_id, current_user)
    return [activity_to_out(a) for a in league_activity(db, league_id, limit=limit)]
