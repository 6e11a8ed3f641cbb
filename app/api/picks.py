import logging
from datetime import datetime

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session, joinedload
from app.api.leagues import require_member
from app.api.races import get_race_or_404
from app.core.dates import utcnow
from app.core.deps import get_current_user
from app.db.session import get_db
from app.db.models.driver import Driver
from app.db.models.f1_race import F1Race
from app.db.models.league import League
from app.db.models.league_member import LeagueMember
from app.db.models.prediction import Prediction
from app.db.models.user import User
from app.schemas.prediction import EventType, MemberWeekResult, PickIn, PickOut, PicksSubmit, ScoredPick
from app.services.activity import record_pick
from app.services.picks import ensure_event_available, ensure_not_locked, is_locked, validate_pick_positions
from app.services.race_scoring import get_race_result

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/picks", tags=["Picks"])


def pick_to_out(p: Prediction, locked: bool) -> PickOut:
    return PickOut(
        id=p.id,
        league_id=p.league_id,
        user_id=p.user_id,
        week_number=p.week_number,
        event_type=p.event_type,
        position=p.position,
        driver_id=p.driver_id,
        driver_name=p.driver.name if p.driver else None,
        driver_team=p.driver.team if p.driver else None,
        is_locked=locked,
        is_scored=p.is_scored,
        points=p.points or 0,
        position_difference=p.position_difference,
    )


def _week_picks(db: Session, league_id: int, week_number: int, event_type: str, user_id: int | None = None):
    query = (
        db.query(Prediction)
        .options(joinedload(Prediction.driver), joinedload(Prediction.user))
        .filter(
            Prediction.league_id == league_id,
            Prediction.week_number == week_number,
            Prediction.event_type == event_type,
        )
    )
    if user_id is not None:
        query = query.filter(Prediction.user_id == user_id)
    return query.order_by(Prediction.user_id, Prediction.position).all()


@router.post("/{league_id}/week/{week_number}", response_model=list[PickOut])
def make_picks(
    league_id: int,
    week_number: int,
    data: PicksSubmit,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    league = require_member(db, league_id, current_user)
    race = get_race_or_404(db, league.season_year, week_number)

    ensure_event_available(race, data.event_type)
    ensure_not_locked(race, data.event_type)

    driver_ids = {p.driver_id for p in data.picks}
    found = db.query(Driver.id).filter(Driver.id.in_(list(driver_ids))).all()
    if len(found) != len(driver_ids):
        raise HTTPException(status_code=404, detail="Piloto no encontrado")

    existing = {
        p.position: p
        for p in _week_picks(db, league_id, week_number, data.event_type, current_user.id)
    }

    validate_pick_positions(league, data.picks)

    # Validamos el conjunto final (lo ya guardado + lo nuevo)
    merged = {
        pos: PickIn(position=pos, driver_id=p.driver_id)
        for pos, p in existing.items()
        if pos in league.required_positions
    }
    merged.update({p.position: p for p in data.picks})
    validate_pick_positions(league, list(merged.values()))

    # 🏁 Guardar posiciones (upsert por posición)
    for pick in data.picks:
        prediction = existing.get(pick.position)
        if prediction:
            previous_driver_id = prediction.driver_id
            prediction.driver_id = pick.driver_id
        else:
            previous_driver_id = None
            prediction = Prediction(
                user_id=current_user.id,
                league_id=league_id,
                week_number=week_number,
                event_type=data.event_type,
                position=pick.position,
                driver_id=pick.driver_id,
            )
            db.add(prediction)
        record_pick(db, prediction, previous_driver_id)

    db.commit()
    logger.info(
        "Picks guardados: usuario %s liga %s semana %s (%s)",
        current_user.id, league_id, week_number, data.event_type,
    )

    picks = _week_picks(db, league_id, week_number, data.event_type, current_user.id)
    return [pick_to_out(p, locked=False) for p in picks]


@router.delete("/{league_id}/week/{week_number}/{event_type}/{position}")
def remove_pick(
    league_id: int,
    week_number: int,
    event_type: EventType,
    position: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    league = require_member(db, league_id, current_user)
    race = get_race_or_404(db, league.season_year, week_number)
    ensure_not_locked(race, event_type)

    prediction = (
        db.query(Prediction)
        .filter(
            Prediction.user_id == current_user.id,
            Prediction.league_id == league_id,
            Prediction.week_number == week_number,
            Prediction.event_type == event_type,
            Prediction.position == position,
        )
        .first()
    )
    if not prediction:
        raise HTTPException(status_code=404, detail="Pick no encontrado")

    db.delete(prediction)
    db.commit()
    return {"message": "Pick eliminado"}


@router.get("/{league_id}/me", response_model=list[PickOut])
def get_my_picks(
    league_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    league = require_member(db, league_id, current_user)
    picks = (
        db.query(Prediction)
        .options(joinedload(Prediction.driver))
        .filter(
            Prediction.league_id == league_id,
            Prediction.user_id == current_user.id,
        )
        .order_by(Prediction.week_number, Prediction.event_type, Prediction.position)
        .all()
    )

    races = _races_by_week(db, league)
    now = utcnow()
    return [
        pick_to_out(p, locked=_pick_locked(races.get(p.week_number), p.event_type, now))
        for p in picks
    ]


@router.get("/{league_id}/week/{week_number}", response_model=list[PickOut])
def get_league_picks(
    league_id: int,
    week_number: int,
    event_type: EventType = "race",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Picks de todos los miembros. Los ajenos solo se ven cuando la semana está bloqueada."""
    league = require_member(db, league_id, current_user)
    race = get_race_or_404(db, league.season_year, week_number)
    locked = is_locked(race, event_type)

    picks = _week_picks(db, league_id, week_number, event_type)
    return [
        pick_to_out(p, locked)
        for p in picks
        if locked or p.user_id == current_user.id
    ]


@router.get("/{league_id}/week/{week_number}/results", response_model=list[MemberWeekResult])
def get_week_results(
    league_id: int,
    week_number: int,
    event_type: EventType = "race",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    league = require_member(db, league_id, current_user)
    context = _result_context(db, league, week_number, event_type)

    members = (
        db.query(User)
        .join(LeagueMember, LeagueMember.user_id == User.id)
        .filter(LeagueMember.league_id == league_id)
        .order_by(User.name)
        .all()
    )
    picks_by_user = {}
    for p in _week_picks(db, league_id, week_number, event_type):
        picks_by_user.setdefault(p.user_id, {})[p.position] = p

    results = []
    for member in members:
        user_picks = picks_by_user.get(member.id, {})
        scored = [
            _scored_pick(position, user_picks.get(position), context)
            for position in league.required_positions
        ]
        results.append(MemberWeekResult(
            user_id=member.id,
            user_name=member.name,
            picks=scored,
            total_points=sum(s.points for s in scored),
            total_correct=sum(1 for s in scored if s.is_correct),
            has_made_all_picks=set(league.required_positions) <= set(user_picks),
        ))

    results.sort(key=lambda r: (-r.total_points, -r.total_correct, r.user_name.lower()))
    return results


@router.get("/{league_id}/week/{week_number}/results/position/{position}")
def get_results_by_position(
    league_id: int,
    week_number: int,
    position: int,
    event_type: EventType = "race",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    league = require_member(db, league_id, current_user)
    if position not in league.required_positions:
        raise HTTPException(status_code=400, detail=f"P{position} no es una posición de esta liga")

    context = _result_context(db, league, week_number, event_type)
    picks = [
        p for p in _week_picks(db, league_id, week_number, event_type)
        if p.position == position
    ]

    entries = []
    for p in picks:
        scored = _scored_pick(position, p, context)
        entries.append({
            "user_id": p.user_id,
            "user_name": p.user.name,
            **scored.model_dump(),
        })

    actual_driver_id = context["by_position"].get(position)
    return {
        "league_id": league_id,
        "week_number": week_number,
        "event_type": event_type,
        "position": position,
        "picks": entries,
        "actual_result": _driver_info(context, actual_driver_id),
        "total_participants": len(entries),
        "correct_picks": sum(1 for e in entries if e["is_correct"]),
    }


@router.get("/{league_id}/week/{week_number}/results/member/{user_id}")
def get_member_picks(
    league_id: int,
    week_number: int,
    user_id: int,
    event_type: EventType = "race",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    league = require_member(db, league_id, current_user)
    member = db.get(User, user_id)
    if not member or not any(m.user_id == user_id for m in league.members):
        raise HTTPException(status_code=404, detail="Miembro no encontrado")

    context = _result_context(db, league, week_number, event_type)
    user_picks = {
        p.position: p
        for p in _week_picks(db, league_id, week_number, event_type, user_id)
        if p.position in league.required_positions
    }
    scored = [
        _scored_pick(position, user_picks.get(position), context)
        for position in league.required_positions
    ]

    correct = sum(1 for s in scored if s.is_correct)
    return {
        "league_id": league_id,
        "week_number": week_number,
        "event_type": event_type,
        "user_id": member.id,
        "user_name": member.name,
        "picks": [s.model_dump() for s in scored],
        "total_points": sum(s.points for s in scored),
        "correct_picks": correct,
        "total_picks": len(user_picks),
        "accuracy": f"{(correct / len(user_picks) * 100) if user_picks else 0:.1f}%",
    }


# -----------------------
# Helpers
# -----------------------
def _races_by_week(db: Session, league: League):
    races = db.query(F1Race).filter(F1Race.season_year == league.season_year).all()
    return {r.week_number: r for r in races}


def _pick_locked(race, event_type: str, now: datetime) -> bool:
    if race is None:
        return False
    return is_locked(race, event_type, now)


def _result_context(db: Session, league: League, week_number: int, event_type: str):
    """Resultado oficial en forma de mapas + nombres de pilotos, o 404 si no hay."""
    race_result = get_race_result(db, league.season_year, week_number, event_type)
    if not race_result:
        raise HTTPException(status_code=404, detail="Resultados no disponibles aún")

    drivers = {d.id: d for d in db.query(Driver).all()}
    return {
        "by_position": {rp.position: rp.driver_id for rp in race_result.positions},
        "by_driver": {rp.driver_id: rp.position for rp in race_result.positions},
        "drivers": drivers,
    }


def _driver_info(context, driver_id):
    driver = context["drivers"].get(driver_id)
    if not driver:
        return None
    return {"driver_id": driver.id, "driver_name": driver.name, "driver_team": driver.team}


def _scored_pick(position: int, prediction: Prediction | None, context) -> ScoredPick:
    actual_driver_id = context["by_position"].get(position)
    actual_driver = context["drivers"].get(actual_driver_id)

    scored = ScoredPick(
        position=position,
        actual_driver_id=actual_driver_id,
        actual_driver_name=actual_driver.name if actual_driver else None,
    )
    if prediction is None:
        return scored

    scored.driver_id = prediction.driver_id
    scored.driver_name = prediction.driver.name if prediction.driver else None
    scored.actual_finish_position = context["by_driver"].get(prediction.driver_id)
    if prediction.is_scored:
        scored.points = prediction.points
        scored.position_difference = prediction.position_difference
        scored.is_correct = prediction.position_difference == 0
    return scored
