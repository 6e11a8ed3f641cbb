# tests/test_scoring.py

"""
Motor de puntuación: tabla de puntos, agregación por carrera y clasificación.
"""

from types import SimpleNamespace

import pytest

from app.services.scoring import (
    POINTS_BY_DIFFERENCE,
    PositionScore,
    ScoreRecord,
    compute_standings,
    score_position,
    score_prediction,
)


def pick(position, driver_id):
    return SimpleNamespace(position=position, driver_id=driver_id)


def result(*driver_ids):
    """Resultado con los pilotos en orden de llegada (P1, P2, ...)."""
    return SimpleNamespace(positions=[
        SimpleNamespace(position=i, driver_id=driver_id)
        for i, driver_id in enumerate(driver_ids, start=1)
    ])


# 20 pilotos: el id coincide con la posición final
FULL_GRID = result(*range(1, 21))


class TestScorePosition:

    @pytest.mark.parametrize("position", range(1, 21))
    def test_exact_pick_scores_ten(self, position):
        score = score_position(pick(position, position), FULL_GRID)
        assert score == PositionScore(position_difference=0, points=10)

    @pytest.mark.parametrize("position", [1, 10, 20])
    def test_absent_driver_scores_zero(self, position):
        score = score_position(pick(position, 99), FULL_GRID)
        assert score.points == 0
        assert score.position_difference is None

    @pytest.mark.parametrize("difference,points", [
        (1, 7), (2, 5), (3, 3), (4, 2), (5, 1), (6, 0), (10, 0), (19, 0),
    ])
    def test_step_table(self, difference, points):
        # Predice P1, el piloto termina en P1 + difference
        score = score_position(pick(1, 1 + difference), FULL_GRID)
        assert score.position_difference == difference
        assert score.points == points

    def test_table_is_exact(self):
        assert POINTS_BY_DIFFERENCE == {0: 10, 1: 7, 2: 5, 3: 3, 4: 2, 5: 1}

    def test_symmetry(self):
        # P1 predicho / P3 real y P3 predicho / P1 real -> diferencia 2
        early = score_position(pick(1, 3), FULL_GRID)
        late = score_position(pick(3, 1), FULL_GRID)
        assert early == late == PositionScore(position_difference=2, points=5)

    def test_accepts_list_of_positions(self):
        score = score_position(pick(10, 10), FULL_GRID.positions)
        assert score.points == 10

    def test_position_outside_finishing_order(self):
        # Solo terminan 5 pilotos; se predice P20 para el que terminó P5
        short = result(1, 2, 3, 4, 5)
        score = score_position(pick(20, 5), short)
        assert score == PositionScore(position_difference=15, points=0)


class TestScorePrediction:

    def test_positions_are_summed_independently(self):
        # Liga P1 + P10: P1 exacto (10) y P10 a dos posiciones (5)
        total = score_prediction([pick(1, 1), pick(10, 12)], FULL_GRID)
        assert total == 15

    def test_miss_does_not_reduce_other_positions(self):
        total = score_prediction([pick(1, 1), pick(10, 99)], FULL_GRID)
        assert total == 10

    def test_empty_prediction(self):
        assert score_prediction([], FULL_GRID) == 0

    def test_maximum_per_race(self):
        assert score_prediction([pick(1, 1), pick(10, 10)], FULL_GRID) == 20

    def test_scoring_page_examples(self):
        VER, HAM, LEC, NOR, PIA, ALO, RUS, ZHO = range(1, 9)
        # Orden de llegada: rellenamos con ids >= 100 los huecos
        order = {1: VER, 10: HAM}
        grid_a = result(*[order.get(i, 100 + i) for i in range(1, 21)])
        assert score_prediction([pick(1, VER), pick(10, HAM)], grid_a) == 20

        order = {2: LEC, 8: NOR}
        grid_b = result(*[order.get(i, 100 + i) for i in range(1, 21)])
        # Norris P8 para P10: dos posiciones -> 5
        assert score_prediction([pick(1, LEC), pick(10, NOR)], grid_b) == 7 + 5

        order = {2: PIA, 11: ALO}
        grid_c = result(*[order.get(i, 100 + i) for i in range(1, 21)])
        assert score_prediction([pick(1, PIA), pick(10, ALO)], grid_c) == 7 + 7

        order = {1: RUS, 15: ZHO}
        grid_d = result(*[order.get(i, 100 + i) for i in range(1, 21)])
        # Zhou P15 para P10: cinco posiciones -> 1
        assert score_prediction([pick(1, RUS), pick(10, ZHO)], grid_d) == 10 + 1

    def test_rescoring_is_idempotent(self):
        picks = [pick(1, 3), pick(10, 10)]
        assert score_prediction(picks, FULL_GRID) == score_prediction(picks, FULL_GRID)


def record(user_id, race, points, diff):
    return ScoreRecord(user_id=user_id, race_id=race, points=points, position_difference=diff)


class TestComputeStandings:

    def test_orders_by_total_points(self):
        standings = compute_standings([
            record(1, (1, "race"), 5, 2),
            record(2, (1, "race"), 10, 0),
            record(3, (1, "race"), 7, 1),
        ])
        assert [s.user_id for s in standings] == [2, 3, 1]
        assert [s.rank for s in standings] == [1, 2, 3]
        assert standings[0].total_points == 10

    def test_tie_broken_by_perfect_picks(self):
        standings = compute_standings([
            # Usuario 1: 5 + 5 = 10, sin exactos
            record(1, (1, "race"), 5, 2),
            record(1, (2, "race"), 5, 2),
            # Usuario 2: 10 + 0 = 10, un exacto
            record(2, (1, "race"), 10, 0),
            record(2, (2, "race"), 0, None),
        ])
        assert [s.user_id for s in standings] == [2, 1]
        assert standings[0].perfect_picks == 1

    def test_tie_broken_by_seven_point_picks(self):
        standings = compute_standings([
            # Usuario 1: 5 + 5 + 7 + 0 = 17
            record(1, (1, "race"), 5, 2),
            record(1, (2, "race"), 5, 2),
            record(1, (3, "race"), 7, 1),
            # Usuario 2: 7 + 7 + 3 = 17
            record(2, (1, "race"), 7, 1),
            record(2, (2, "race"), 7, 1),
            record(2, (3, "race"), 3, 3),
        ])
        assert [s.user_id for s in standings] == [2, 1]
        assert standings[0].seven_point_picks == 2

    def test_tie_broken_by_average_points(self):
        standings = compute_standings([
            # Usuario 1: 10 puntos en dos carreras
            record(1, (1, "race"), 5, 2),
            record(1, (2, "race"), 5, 2),
            # Usuario 2: 10 puntos en una carrera
            record(2, (1, "race"), 5, 2),
            record(2, (1, "race"), 5, 2),
        ])
        assert [s.user_id for s in standings] == [2, 1]
        assert standings[0].average_points == 10
        assert standings[1].average_points == 5

    def test_full_tie_falls_back_to_user_id(self):
        standings = compute_standings([
            record(7, (1, "race"), 3, 3),
            record(4, (1, "race"), 3, 3),
        ])
        assert [s.user_id for s in standings] == [4, 7]

    def test_full_tie_uses_names_when_given(self):
        standings = compute_standings(
            [record(4, (1, "race"), 3, 3), record(7, (1, "race"), 3, 3)],
            names={4: "Zoe", 7: "adam"},
        )
        assert [s.user_id for s in standings] == [7, 4]

    def test_members_without_scores_are_ranked_last(self):
        standings = compute_standings(
            [record(1, (1, "race"), 0, None)],
            member_ids=[1, 2],
        )
        assert [s.user_id for s in standings] == [1, 2]
        zero = standings[1]
        assert zero.total_points == 0
        assert zero.average_points == 0
        assert zero.races_participated == 0
        assert zero.average_distance is None

    def test_members_without_scores_go_after_zero_point_players(self):
        # El nombre no puede adelantar a quien sí jugó
        standings = compute_standings(
            [record(1, (1, "race"), 0, None)],
            member_ids=[1, 2],
            names={1: "Zed", 2: "Amy"},
        )
        assert [(s.user_id, s.races_participated) for s in standings] == [(1, 1), (2, 0)]
        assert [s.rank for s in standings] == [1, 2]

    def test_race_and_sprint_count_as_separate_races(self):
        standings = compute_standings([
            record(1, (1, "race"), 10, 0),
            record(1, (1, "sprint"), 4, None),
        ])
        assert standings[0].races_participated == 2
        assert standings[0].average_points == 7

    def test_average_distance_ignores_absent_drivers(self):
        standings = compute_standings([
            record(1, (1, "race"), 5, 2),
            record(1, (2, "race"), 3, 4),
            record(1, (3, "race"), 0, None),
        ])
        assert standings[0].average_distance == 3
        assert standings[0].total_picks == 3

    def test_is_idempotent(self):
        scores = [
            record(1, (1, "race"), 5, 2),
            record(2, (1, "race"), 5, 2),
            record(3, (1, "race"), 10, 0),
        ]
        assert compute_standings(scores) == compute_standings(scores)

    def test_empty_input(self):
        assert compute_standings([]) == []
