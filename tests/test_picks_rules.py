# tests/test_picks_rules.py

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from app.core.exceptions import (
    DuplicateDriverPickError,
    InvalidLeagueConfigError,
    InvalidRaceResultError,
    PositionNotRequiredError,
    PredictionLockedError,
    ResultMismatchError,
    SprintNotAvailableError,
)
from app.services.picks import (
    ensure_event_available,
    ensure_not_locked,
    ensure_result_matches,
    get_lock_time,
    is_locked,
    validate_pick_positions,
    validate_required_positions,
    validate_result_positions,
)

QUALY = datetime(2025, 5, 24, 14, 0)


def race(has_sprint=False, sprint_qualy=None):
    return SimpleNamespace(
        week_number=8,
        qualifying_datetime=QUALY,
        has_sprint=has_sprint,
        sprint_qualifying_datetime=sprint_qualy,
    )


def pick(position, driver_id):
    return SimpleNamespace(position=position, driver_id=driver_id)


class TestLockTime:

    def test_lock_is_qualifying_minus_offset(self):
        assert get_lock_time(race(), offset_minutes=5) == QUALY - timedelta(minutes=5)

    def test_sprint_uses_sprint_qualifying(self):
        sprint_qualy = QUALY - timedelta(days=1)
        r = race(has_sprint=True, sprint_qualy=sprint_qualy)
        assert get_lock_time(r, "sprint", offset_minutes=0) == sprint_qualy
        assert get_lock_time(r, "race", offset_minutes=0) == QUALY

    def test_sprint_without_sprint_qualifying_falls_back(self):
        r = race(has_sprint=True)
        assert get_lock_time(r, "sprint", offset_minutes=0) == QUALY

    def test_is_locked_boundary(self):
        lock = QUALY - timedelta(minutes=5)
        assert not is_locked(race(), now=lock - timedelta(seconds=1), offset_minutes=5)
        assert is_locked(race(), now=lock, offset_minutes=5)

    def test_aware_times_are_compared_in_utc(self):
        madrid = timezone(timedelta(hours=2))
        r = race()
        r.qualifying_datetime = datetime(2025, 5, 24, 16, 0, tzinfo=madrid)  # 14:00 UTC

        assert get_lock_time(r, offset_minutes=0) == QUALY
        assert is_locked(r, now=QUALY + timedelta(minutes=1), offset_minutes=0)
        assert not is_locked(r, now=datetime(2025, 5, 24, 15, 59, tzinfo=madrid), offset_minutes=0)

    def test_ensure_not_locked_raises(self):
        with pytest.raises(PredictionLockedError) as exc:
            ensure_not_locked(race(), now=QUALY)
        assert exc.value.status_code == 423


class TestEvents:

    def test_sprint_requires_sprint_weekend(self):
        with pytest.raises(SprintNotAvailableError):
            ensure_event_available(race(), "sprint")
        ensure_event_available(race(has_sprint=True), "sprint")

    def test_unknown_event(self):
        with pytest.raises(InvalidRaceResultError):
            ensure_event_available(race(), "qualifying")


class TestRequiredPositions:

    @pytest.mark.parametrize("positions,expected", [
        ([10], [10]),
        ([10, 1], [1, 10]),
        ([20], [20]),
    ])
    def test_valid(self, positions, expected):
        assert validate_required_positions(positions) == expected

    @pytest.mark.parametrize("positions", [
        [], [1, 5, 10], [0], [21], [10, 10],
    ])
    def test_invalid(self, positions):
        with pytest.raises(InvalidLeagueConfigError):
            validate_required_positions(positions)


class TestPickPositions:

    league = SimpleNamespace(required_positions=[1, 10])

    def test_valid_picks(self):
        validate_pick_positions(self.league, [pick(1, 1), pick(10, 2)])

    def test_position_not_required(self):
        with pytest.raises(PositionNotRequiredError) as exc:
            validate_pick_positions(self.league, [pick(5, 1)])
        assert exc.value.position == 5

    def test_same_position_twice(self):
        with pytest.raises(PositionNotRequiredError):
            validate_pick_positions(self.league, [pick(1, 1), pick(1, 2)])

    def test_same_driver_twice(self):
        with pytest.raises(DuplicateDriverPickError):
            validate_pick_positions(self.league, [pick(1, 3), pick(10, 3)])


class TestResultPositions:

    def test_valid_with_gaps(self):
        validate_result_positions([(1, 10), (2, 11), (5, 12)])

    @pytest.mark.parametrize("entries", [
        [],
        [(0, 1)],
        [(21, 1)],
        [(1, 1), (1, 2)],
        [(1, 1), (2, 1)],
    ])
    def test_invalid(self, entries):
        with pytest.raises(InvalidRaceResultError):
            validate_result_positions(entries)


class TestResultMatches:

    result = SimpleNamespace(week_number=3, event_type="race")

    def test_matching(self):
        ensure_result_matches(
            [SimpleNamespace(week_number=3, event_type="race")],
            self.result,
        )

    @pytest.mark.parametrize("week,event_type", [(4, "race"), (3, "sprint")])
    def test_mismatch(self, week, event_type):
        with pytest.raises(ResultMismatchError):
            ensure_result_matches(
                [SimpleNamespace(week_number=week, event_type=event_type)],
                self.result,
            )
