from sqlalchemy.orm import Session

from app.db.models.league import League
from app.db.models.league_member import LeagueMember
from app.db.models.prediction import Prediction
from app.db.models.user import User
from app.services.scoring import ScoreRecord, compute_standings


def load_score_records(db: Session, league_id: int, positions=None) -> list[ScoreRecord]:
    """Predicciones puntuadas de la liga. `positions` limita a esas posiciones."""
    query = db.query(Prediction).filter(
        Prediction.league_id == league_id,
        Prediction.is_scored.is_(True),
    )
    if positions is not None:
        query = query.filter(Prediction.position.in_(list(positions)))

    return [
        ScoreRecord(
            user_id=p.user_id,
            race_id=(p.week_number, p.event_type),
            points=p.points,
            position_difference=p.position_difference,
        )
        for p in query.all()
    ]


def league_standings(db: Session, league_id: int):
    """
    Clasificación de la liga. Devuelve [(LeagueStanding, User)] ya ordenada.
    Los miembros sin carreras puntuadas también aparecen (0 puntos).
    Solo cuentan las posiciones que la liga pide ahora, igual que en los resultados.
    """
    league = db.get(League, league_id)
    members = (
        db.query(User)
        .join(LeagueMember, LeagueMember.user_id == User.id)
        .filter(LeagueMember.league_id == league_id)
        .all()
    )
    users = {u.id: u for u in members}

    positions = league.required_positions if league else None
    scores = [
        s for s in load_score_records(db, league_id, positions)
        if s.user_id in users
    ]

    standings = compute_standings(
        scores,
        member_ids=users.keys(),
        names={u.id: u.name for u in members},
    )
    return [(s, users[s.user_id]) for s in standings]
