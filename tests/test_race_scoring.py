# tests/test_race_scoring.py

"""
Proceso de puntuación contra la base de datos: guarda puntos y diferencia
de posiciones en cada predicción y se puede repetir sin cambiar nada.
"""

import pytest

from app.core.exceptions import RaceResultNotFoundError, ResultMismatchError
from app.db.models.league import League
from app.db.models.league_member import LeagueMember
from app.db.models.prediction import Prediction
from app.db.models.race_position import RacePosition
from app.db.models.race_result import RaceResult
from app.services.race_scoring import apply_scores, score_event
from app.services.standings import league_standings

from conftest import SEASON


def make_league(db, owner, positions, members=(), code="ABC-123"):
    league = League(
        name="Liga",
        owner_id=owner.id,
        season_year=SEASON,
        join_code=code,
        required_positions=positions,
    )
    league.members.append(LeagueMember(user_id=owner.id, role="Owner"))
    for member in members:
        league.members.append(LeagueMember(user_id=member.id))
    db.add(league)
    db.commit()
    return league


def add_pick(db, user, league, position, driver, week=1, event_type="race"):
    db.add(Prediction(
        user_id=user.id,
        league_id=league.id,
        week_number=week,
        event_type=event_type,
        position=position,
        driver_id=driver.id,
    ))
    db.commit()


def enter_result(db, order, week=1, event_type="race"):
    """order: lista de pilotos en orden de llegada"""
    result = RaceResult(season_year=SEASON, week_number=week, event_type=event_type)
    for i, driver in enumerate(order, start=1):
        result.positions.append(RacePosition(position=i, driver_id=driver.id))
    db.add(result)
    db.commit()
    return result


@pytest.fixture
def finishing_order(drivers):
    # P1 Verstappen, P2 Leclerc ... P8 Hamilton
    d = drivers
    return [
        d["Verstappen"], d["Leclerc"], d["Piastri"], d["Norris"], d["Russell"],
        d["Alonso"], d["Guanyu"], d["Hamilton"],
    ]


def test_score_event_persists_points(db, alice, bob, drivers, finishing_order):
    league = make_league(db, alice, [1, 10], members=[bob])
    add_pick(db, alice, league, 1, drivers["Verstappen"])   # P1 exacto -> 10
    add_pick(db, alice, league, 10, drivers["Hamilton"])    # real P8 -> 5
    add_pick(db, bob, league, 1, drivers["Leclerc"])        # real P2 -> 7
    enter_result(db, finishing_order)

    summary = score_event(db, SEASON, 1, "race")

    assert summary.predictions_scored == 3
    assert summary.leagues_scored == [league.id]
    assert summary.total_points == 22

    picks = {(p.user_id, p.position): p for p in db.query(Prediction).all()}
    assert picks[(alice.id, 1)].points == 10
    assert picks[(alice.id, 1)].position_difference == 0
    assert picks[(alice.id, 10)].points == 5
    assert picks[(alice.id, 10)].position_difference == 2
    assert picks[(bob.id, 1)].points == 7
    assert all(p.is_scored for p in picks.values())


def test_absent_driver_scores_zero(db, alice, drivers, finishing_order):
    league = make_league(db, alice, [10])
    # Resultado corto: Hamilton no termina
    add_pick(db, alice, league, 10, drivers["Hamilton"])
    enter_result(db, finishing_order[:3])

    score_event(db, SEASON, 1, "race")

    p = db.query(Prediction).one()
    assert p.points == 0
    assert p.position_difference is None
    assert p.is_scored


def test_rescoring_is_idempotent(db, alice, drivers, finishing_order):
    league = make_league(db, alice, [1, 10])
    add_pick(db, alice, league, 1, drivers["Leclerc"])
    add_pick(db, alice, league, 10, drivers["Alonso"])
    enter_result(db, finishing_order)

    first = score_event(db, SEASON, 1, "race")
    before = [(p.id, p.points, p.position_difference) for p in db.query(Prediction).order_by(Prediction.id)]
    second = score_event(db, SEASON, 1, "race")
    after = [(p.id, p.points, p.position_difference) for p in db.query(Prediction).order_by(Prediction.id)]

    assert before == after
    assert first.total_points == second.total_points


def test_only_matching_event_is_scored(db, alice, drivers, finishing_order):
    league = make_league(db, alice, [1])
    add_pick(db, alice, league, 1, drivers["Verstappen"], event_type="race")
    add_pick(db, alice, league, 1, drivers["Verstappen"], event_type="sprint")
    add_pick(db, alice, league, 1, drivers["Verstappen"], week=2)
    enter_result(db, finishing_order)

    summary = score_event(db, SEASON, 1, "race")

    assert summary.predictions_scored == 1
    scored = db.query(Prediction).filter(Prediction.is_scored.is_(True)).one()
    assert (scored.week_number, scored.event_type) == (1, "race")


def test_single_league_rescoring(db, alice, bob, drivers, finishing_order):
    first = make_league(db, alice, [1], code="AAA-111")
    second = make_league(db, bob, [1], code="BBB-222")
    add_pick(db, alice, first, 1, drivers["Verstappen"])
    add_pick(db, bob, second, 1, drivers["Verstappen"])
    enter_result(db, finishing_order)

    summary = score_event(db, SEASON, 1, "race", league_id=second.id)

    assert summary.leagues_scored == [second.id]
    assert summary.predictions_scored == 1


def test_missing_result_raises(db):
    with pytest.raises(RaceResultNotFoundError):
        score_event(db, SEASON, 1, "race")


def test_league_standings_include_members_without_picks(db, alice, bob, drivers, finishing_order):
    league = make_league(db, alice, [1], members=[bob])
    add_pick(db, alice, league, 1, drivers["Leclerc"])
    enter_result(db, finishing_order)
    score_event(db, SEASON, 1, "race")

    standings = league_standings(db, league.id)

    assert [user.name for _, user in standings] == ["Alice", "Bob"]
    assert standings[0][0].total_points == 7
    assert standings[1][0].total_points == 0
    assert standings[1][0].rank == 2


def test_apply_scores_rejects_predictions_of_another_event(db, alice, drivers, finishing_order):
    league = make_league(db, alice, [1])
    add_pick(db, alice, league, 1, drivers["Verstappen"], event_type="sprint")
    result = enter_result(db, finishing_order)

    predictions = db.query(Prediction).all()
    with pytest.raises(ResultMismatchError) as exc:
        apply_scores(predictions, result)

    assert exc.value.status_code == 409
    assert not predictions[0].is_scored


def test_standings_ignore_positions_dropped_by_the_league(db, alice, drivers, finishing_order):
    league = make_league(db, alice, [1, 10])
    add_pick(db, alice, league, 1, drivers["Verstappen"])
    add_pick(db, alice, league, 10, drivers["Hamilton"])
    enter_result(db, finishing_order)
    score_event(db, SEASON, 1, "race")

    # La liga deja de pedir P10: esos puntos ya no cuentan
    league.required_positions = [1]
    db.commit()

    standing, _ = league_standings(db, league.id)[0]
    assert standing.total_points == 10
    assert standing.total_picks == 1
