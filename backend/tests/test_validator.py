from datetime import timedelta

import pytest

from aeroclub.config import BufferPolicy
from aeroclub.engine import (
    InvalidDurationError,
    Mission,
    MissingResourceError,
    RejectReason,
    derive_windows,
    next_available_after,
    next_available_start,
    overlaps,
    suggest_start_times,
    validate_mission,
    validate_start,
)
from tests.conftest import dt


def proposal(start: str, hours: float = 10, resource_id=1, **kw) -> Mission:
    s = dt(start)
    return Mission(scheduled_start=s, scheduled_end=s + timedelta(hours=hours), resource_id=resource_id, **kw)


def test_next_available_is_end_plus_gap(mission_a):
    assert next_available_start(mission_a) == dt("2025-01-02T00:00")


def test_next_available_scenario_from_spec_example():
    a = Mission(resource_id=1, scheduled_start=dt("2025-01-01T04:00"), scheduled_end=dt("2025-01-01T21:00"))
    assert next_available_start(a) == dt("2025-01-02T00:00")


@pytest.mark.parametrize("start", ["2025-01-01T21:30", "2025-01-01T22:00", "2025-01-01T23:00", "2025-01-01T23:59"])
def test_start_before_gap_has_cleared_is_rejected(mission_a, start):
    result = validate_mission(proposal(start), [mission_a])
    assert not result.accepted
    assert result.reason == RejectReason.PRE_USE_INTRUSION
    assert result.conflicting_mission == mission_a
    assert result.suggested_start == dt("2025-01-02T00:00")
    assert result.next_available_start == dt("2025-01-02T00:00")
    assert result.message


@pytest.mark.parametrize("start", ["2025-01-02T00:00", "2025-01-02T06:30", "2025-01-05T00:00"])
def test_start_once_gap_has_cleared_is_accepted(mission_a, start):
    result = validate_mission(proposal(start), [mission_a])
    assert result.accepted
    assert result.reason == RejectReason.OK
    assert result.suggested_start == dt(start)
    assert result.next_available_start == dt(start) + timedelta(hours=13)


def test_start_inside_existing_span_is_a_path_conflict(mission_a):
    result = validate_mission(proposal("2025-01-01T20:00"), [mission_a])
    assert not result.accepted
    assert result.reason == RejectReason.PATH_CONFLICT
    assert "SBMT -> SBRJ" in result.message
    assert result.conflicting_mission == mission_a
    assert result.suggested_start == dt("2025-01-02T00:00")


def test_proposal_swallowing_an_existing_mission_is_a_path_conflict(mission_a):
    result = validate_mission(proposal("2024-12-31T12:00", hours=72), [mission_a])
    assert result.reason == RejectReason.PATH_CONFLICT
    assert result.conflicting_mission == mission_a


def test_proposal_ending_when_another_begins_is_accepted(mission_a):
    # only the span before a take-off needs to be clear
    result = validate_mission(proposal("2024-12-31T21:00", hours=10), [mission_a])
    assert result.accepted


def test_return_before_departure_is_rejected_without_exception(mission_a):
    m = Mission(resource_id=1, scheduled_start=dt("2025-02-01T10:00"), scheduled_end=dt("2025-02-01T09:00"))
    result = validate_mission(m, [mission_a])
    assert not result.accepted
    assert result.reason == RejectReason.INVALID_TIMES
    assert result.conflicting_mission is None


def test_reversed_take_off_and_landing_is_invalid_times(mission_a):
    # the buffers alone would widen 10:00 -> 09:00 into a 5h scheduled span
    m = Mission.from_actual(dt("2025-02-01T10:00"), dt("2025-02-01T09:00"), resource_id=1)
    assert m.scheduled_end > m.scheduled_start
    result = validate_mission(m, [mission_a])
    assert not result.accepted
    assert result.reason == RejectReason.INVALID_TIMES
    assert result.message == "Return must be after departure"


def test_sub_minute_span_is_rejected_without_exception():
    s = dt("2025-02-01T10:00")
    m = Mission(resource_id=1, scheduled_start=s, scheduled_end=s + timedelta(seconds=30))
    result = validate_mission(m, [], BufferPolicy.unbuffered())
    assert not result.accepted
    assert result.reason == RejectReason.TOO_SHORT


def test_span_shorter_than_buffers_is_a_fault():
    with pytest.raises(InvalidDurationError):
        validate_mission(proposal("2025-02-01T10:00", hours=4), [])


def test_missing_aircraft_is_a_fault(mission_a):
    with pytest.raises(MissingResourceError):
        validate_mission(proposal("2025-02-01T10:00", resource_id=None), [mission_a])


def test_missions_on_other_aircraft_are_ignored(mission_a):
    result = validate_mission(proposal("2025-01-01T08:00", resource_id=2), [mission_a])
    assert result.accepted


def test_revalidating_a_stored_mission_ignores_itself(mission_a):
    result = validate_mission(mission_a, [mission_a])
    assert result.accepted


def test_first_mission_by_start_is_reported_whatever_the_input_order():
    early = Mission(id=9, resource_id=1, scheduled_start=dt("2025-03-01T06:00"), scheduled_end=dt("2025-03-01T14:00"))
    late = Mission(id=4, resource_id=1, scheduled_start=dt("2025-03-01T16:00"), scheduled_end=dt("2025-03-01T23:00"))
    big = proposal("2025-03-01T00:00", hours=30)
    for existing in ([early, late], [late, early]):
        result = validate_mission(big, existing)
        assert result.conflicting_mission == early


def test_ties_on_start_are_broken_by_id():
    a = Mission(id=7, resource_id=1, scheduled_start=dt("2025-03-01T06:00"), scheduled_end=dt("2025-03-01T14:00"))
    b = Mission(id=3, resource_id=1, scheduled_start=dt("2025-03-01T06:00"), scheduled_end=dt("2025-03-01T18:00"))
    result = validate_mission(proposal("2025-03-01T08:00"), [a, b])
    assert result.conflicting_mission == b


def test_validate_start_alone(mission_a):
    assert validate_start(dt("2025-01-02T00:00"), [mission_a]).accepted
    rejected = validate_start(dt("2025-01-01T23:00"), [mission_a])
    assert not rejected.accepted
    assert "Post-flight maintenance" in rejected.message
    assert rejected.conflicting_mission == mission_a


def test_no_false_accepts():
    existing = [
        Mission(id=1, resource_id=1, scheduled_start=dt("2025-04-01T04:00"), scheduled_end=dt("2025-04-01T21:00")),
        Mission(id=2, resource_id=1, scheduled_start=dt("2025-04-02T12:00"), scheduled_end=dt("2025-04-02T20:00")),
    ]
    theirs = [w for m in existing for w in derive_windows(m)]
    start = dt("2025-03-31T12:00")
    for step in range(0, 4 * 24 * 2):
        s = start + timedelta(minutes=30 * step)
        for hours in (6, 9, 20):
            m = Mission(resource_id=1, scheduled_start=s, scheduled_end=s + timedelta(hours=hours))
            result = validate_mission(m, existing)
            if any(overlaps(a.start, a.end, b.start, b.end) for a in derive_windows(m) for b in theirs):
                assert not result.accepted, (s, hours)


def test_next_available_after_picks_first_mission_still_running(mission_a):
    later = Mission(id=2, resource_id=1, scheduled_start=dt("2025-01-03T07:00"), scheduled_end=dt("2025-01-03T21:00"))
    assert next_available_after(dt("2025-01-01T12:00"), [later, mission_a]) == dt("2025-01-02T00:00")
    assert next_available_after(dt("2025-01-02T12:00"), [later, mission_a]) == dt("2025-01-04T00:00")
    assert next_available_after(dt("2025-01-05T00:00"), [later, mission_a]) == dt("2025-01-05T00:00")


def test_suggestions_walk_past_conflicts(mission_a):
    got = suggest_start_times(1, dt("2025-01-01T12:00"), 2, [mission_a])
    assert got == [dt("2025-01-02T00:00"), dt("2025-01-02T11:00"), dt("2025-01-02T22:00")]


def test_suggestions_on_free_aircraft_start_at_desired_time():
    got = suggest_start_times(1, dt("2025-06-01T08:00"), 1, [], max_suggestions=1)
    assert got == [dt("2025-06-01T08:00")]


def test_mission_stored_under_shorter_buffers_does_not_break_validation():
    # 10:00-15:00 was valid under 2h+2h; the current policy wants 3h+3h
    legacy = Mission(id=7, resource_id=1, scheduled_start=dt("2025-02-01T10:00"), scheduled_end=dt("2025-02-01T15:00"))

    free = validate_mission(proposal("2025-02-02T10:00"), [legacy])
    assert free.accepted

    clash = validate_mission(proposal("2025-02-01T12:00"), [legacy])
    assert clash.reason == RejectReason.PATH_CONFLICT
    assert clash.conflicting_mission == legacy
    assert clash.suggested_start == dt("2025-02-01T18:00")

    late = validate_start(dt("2025-02-01T16:00"), [legacy])
    assert late.reason == RejectReason.PRE_USE_INTRUSION
