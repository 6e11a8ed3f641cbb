import logging
import secrets
import string

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, joinedload
from app.core.config import settings
from app.core.deps import get_current_user
from app.db.session import get_db
from app.db.models.league import League
from app.db.models.league_member import LeagueMember
from app.db.models.user import User
from app.schemas.league import (
    JoinByCode,
    LeagueCreate,
    LeagueMemberOut,
    LeagueOut,
    LeaguePositionsUpdate,
    LeagueUpdate,
)
from app.schemas.standings import DetailedStandingOut, StandingOut
from app.schemas.stats import LeagueStatsOut
from app.services.activity import USER_JOINED, record_activity
from app.services.picks import validate_required_positions
from app.services.standings import league_standings
from app.services.stats import league_stats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leagues", tags=["Leagues"])

def generate_join_code():
    """Genera un código aleatorio de 6 caracteres (Ej: A7X-9Y2)"""
    chars = string.ascii_uppercase + string.digits
    part1 = ''.join(secrets.choice(chars) for _ in range(3))
    part2 = ''.join(secrets.choice(chars) for _ in range(3))
    return f"{part1}-{part2}"

def get_league_or_404(db: Session, league_id: int) -> League:
    league = (
        db.query(League)
        .options(joinedload(League.members))
        .filter(League.id == league_id, League.is_active.is_(True))
        .first()
    )
    if not league:
        raise HTTPException(status_code=404, detail="Liga no encontrada")
    return league

def get_membership(league: League, user_id: int) -> LeagueMember | None:
    return next((m for m in league.members if m.user_id == user_id), None)

def require_member(db: Session, league_id: int, user: User) -> League:
    league = get_league_or_404(db, league_id)
    if not get_membership(league, user.id) and user.role != "admin":
        raise HTTPException(status_code=403, detail="No eres miembro de esta liga")
    return league

def require_owner(db: Session, league_id: int, user: User) -> League:
    league = get_league_or_404(db, league_id)
    if league.owner_id != user.id and user.role != "admin":
        raise HTTPException(status_code=403, detail="Solo el propietario puede modificar la liga")
    return league

def league_to_out(league: League, user_id: int) -> LeagueOut:
    membership = get_membership(league, user_id)
    return LeagueOut(
        id=league.id,
        name=league.name,
        owner_id=league.owner_id,
        season_year=league.season_year,
        join_code=league.join_code,
        required_positions=league.required_positions,
        member_count=len(league.members),
        user_role=membership.role if membership else None,
        created_at=league.created_at,
    )


@router.post("/", response_model=LeagueOut, status_code=201)
def create_league(
    data: LeagueCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    positions = validate_required_positions(data.positions)

    code = generate_join_code()
    while db.query(League).filter(League.join_code == code).first():
        code = generate_join_code() # Reintentar si hay colisión (muy raro)

    league = League(
        name=data.name.strip(),
        owner_id=current_user.id,
        season_year=data.season_year or settings.CURRENT_SEASON_YEAR,
        join_code=code,
        required_positions=positions,
    )
    league.members.append(LeagueMember(user_id=current_user.id, role="Owner"))
    db.add(league)
    db.commit()
    db.refresh(league)

    logger.info("Liga %s creada por %s (posiciones %s)", league.id, current_user.id, positions)
    return league_to_out(league, current_user.id)

@router.get("/", response_model=list[LeagueOut])
def get_my_leagues(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    leagues = (
        db.query(League)
        .options(joinedload(League.members))
        .join(LeagueMember, LeagueMember.league_id == League.id)
        .filter(LeagueMember.user_id == current_user.id, League.is_active.is_(True))
        .order_by(League.created_at.desc())
        .all()
    )
    return [league_to_out(l, current_user.id) for l in leagues]

@router.get("/{league_id}", response_model=LeagueOut)
def get_league(
    league_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    league = require_member(db, league_id, current_user)
    return league_to_out(league, current_user.id)

@router.put("/{league_id}", response_model=LeagueOut)
def update_league(
    league_id: int,
    data: LeagueUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    league = require_owner(db, league_id, current_user)
    league.name = data.name.strip()
    db.commit()
    db.refresh(league)
    return league_to_out(league, current_user.id)

@router.delete("/{league_id}")
def delete_league(
    league_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    league = require_owner(db, league_id, current_user)
    # Borrado lógico: las predicciones se conservan
    league.is_active = False
    db.commit()
    return {"message": "Liga eliminada"}

@router.post("/join-by-code", response_model=LeagueOut)
def join_by_code(
    data: JoinByCode,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    league = (
        db.query(League)
        .filter(League.join_code == data.join_code.strip().upper(), League.is_active.is_(True))
        .first()
    )
    if not league:
        raise HTTPException(status_code=404, detail="Código no válido")

    if get_membership(league, current_user.id):
        raise HTTPException(status_code=400, detail="Ya eres miembro de esta liga")

    league.members.append(LeagueMember(user_id=current_user.id, role="Member"))
    record_activity(db, league.id, USER_JOINED, user_id=current_user.id)
    db.commit()
    db.refresh(league)
    return league_to_out(league, current_user.id)

@router.post("/{league_id}/leave")
def leave_league(
    league_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    league = get_league_or_404(db, league_id)
    membership = get_membership(league, current_user.id)
    if not membership:
        raise HTTPException(status_code=400, detail="No eres miembro de esta liga")
    if league.owner_id == current_user.id:
        raise HTTPException(status_code=400, detail="El propietario no puede abandonar la liga")

    db.delete(membership)
    db.commit()
    return {"message": "Has abandonado la liga"}

@router.get("/{league_id}/members", response_model=list[LeagueMemberOut])
def get_league_members(
    league_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    require_member(db, league_id, current_user)
    members = (
        db.query(LeagueMember)
        .options(joinedload(LeagueMember.user))
        .filter(LeagueMember.league_id == league_id)
        .order_by(LeagueMember.joined_at, LeagueMember.id)
        .all()
    )
    return [
        LeagueMemberOut(user_id=m.user_id, name=m.user.name, role=m.role, joined_at=m.joined_at)
        for m in members
    ]

@router.get("/{league_id}/positions")
def get_league_positions(
    league_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    league = require_member(db, league_id, current_user)
    return {"league_id": league.id, "positions": league.required_positions}

@router.put("/{league_id}/positions")
def update_league_positions(
    league_id: int,
    data: LeaguePositionsUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    league = require_owner(db, league_id, current_user)
    league.required_positions = validate_required_positions(data.positions)
    db.commit()

    logger.info("Liga %s: posiciones obligatorias -> %s", league.id, league.required_positions)
    return {"league_id": league.id, "positions": league.required_positions}

@router.get("/{league_id}/standings", response_model=list[StandingOut])
def get_standings(
    league_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    require_member(db, league_id, current_user)
    return [
        StandingOut(
            rank=s.rank,
            user_id=s.user_id,
            user_name=user.name,
            total_points=s.total_points,
        )
        for s, user in league_standings(db, league_id)
    ]

@router.get("/{league_id}/standings/detailed", response_model=list[DetailedStandingOut])
def get_detailed_standings(
    league_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    require_member(db, league_id, current_user)
    return [
        DetailedStandingOut(
            rank=s.rank,
            user_id=s.user_id,
            user_name=user.name,
            total_points=s.total_points,
            total_picks=s.total_picks,
            correct_picks=s.correct_picks,
            perfect_picks=s.perfect_picks,
            seven_point_picks=s.seven_point_picks,
            races_participated=s.races_participated,
            average_points=round(s.average_points, 2),
            average_distance=round(s.average_distance, 2) if s.average_distance is not None else None,
        )
        for s, user in league_standings(db, league_id)
    ]

@router.get("/{league_id}/stats", response_model=LeagueStatsOut)
def get_league_stats(
    league_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    league = require_member(db, league_id, current_user)
    return league_stats(db, league)
