from datetime import datetime, timedelta
from itertools import product

import pytest

from aeroclub.config import BufferPolicy, DEFAULT_POLICY, UNBUFFERED_POLICY
from aeroclub.engine import (
    InvalidDurationError,
    Mission,
    Window,
    WindowKind,
    blocked_windows,
    derive_windows,
    overlaps,
    slot_overlaps_window,
)
from tests.conftest import dt

BASE = datetime(2025, 1, 1)


def _h(n: float) -> datetime:
    return BASE + timedelta(hours=n)


def test_overlap_is_symmetric():
    points = [0, 1, 2, 3, 4, 5]
    for a0, a1, b0, b1 in product(points, repeat=4):
        if a1 <= a0 or b1 <= b0:
            continue
        assert overlaps(_h(a0), _h(a1), _h(b0), _h(b1)) == overlaps(_h(b0), _h(b1), _h(a0), _h(a1))


def test_touching_intervals_do_not_overlap():
    assert not overlaps(_h(0), _h(3), _h(3), _h(6))
    assert not overlaps(_h(3), _h(6), _h(0), _h(3))
    assert overlaps(_h(0), _h(3), _h(2.5), _h(6))


def test_slot_three_way_check_matches_overlaps():
    window = Window(_h(4), _h(7), WindowKind.PRE_USE)
    for start in range(0, 20):
        s = BASE + timedelta(minutes=30 * start)
        e = s + timedelta(minutes=30)
        assert slot_overlaps_window(s, e, window) == overlaps(s, e, window.start, window.end)
    # a slot larger than the window contains it
    assert slot_overlaps_window(_h(3), _h(8), window)


def test_derive_windows_scenario(mission_a):
    pre, in_use, post = derive_windows(mission_a)
    assert (pre.start, pre.end, pre.kind) == (dt("2025-01-01T07:00"), dt("2025-01-01T10:00"), WindowKind.PRE_USE)
    assert (in_use.start, in_use.end, in_use.kind) == (dt("2025-01-01T10:00"), dt("2025-01-01T18:00"), WindowKind.IN_USE)
    assert (post.start, post.end, post.kind) == (dt("2025-01-01T18:00"), dt("2025-01-01T21:00"), WindowKind.POST_USE)
    assert all(w.mission is mission_a for w in (pre, in_use, post))


@pytest.mark.parametrize("hours", [6.5, 7, 14, 48])
def test_windows_are_contiguous(hours):
    m = Mission(scheduled_start=_h(1), scheduled_end=_h(1 + hours), resource_id=1)
    pre, in_use, post = derive_windows(m)
    assert pre.start == m.scheduled_start
    assert pre.end == in_use.start
    assert in_use.end == post.start
    assert post.end == m.scheduled_end
    assert not overlaps(pre.start, pre.end, in_use.start, in_use.end)
    assert not overlaps(in_use.start, in_use.end, post.start, post.end)


def test_span_shorter_than_buffers_is_rejected_at_the_deriver():
    m = Mission(scheduled_start=_h(8), scheduled_end=_h(13), resource_id=1)
    with pytest.raises(InvalidDurationError) as exc:
        derive_windows(m)
    assert exc.value.mission is m
    assert exc.value.minimum == timedelta(hours=6)


def test_span_equal_to_buffers_has_no_in_use_window():
    m = Mission(scheduled_start=_h(8), scheduled_end=_h(14), resource_id=1)
    kinds = [w.kind for w in derive_windows(m)]
    assert kinds == [WindowKind.PRE_USE, WindowKind.POST_USE]


def test_unbuffered_policy_yields_single_in_use_window():
    m = Mission(scheduled_start=_h(8), scheduled_end=_h(9), resource_id=1)
    (only,) = derive_windows(m, UNBUFFERED_POLICY)
    assert (only.start, only.end, only.kind) == (_h(8), _h(9), WindowKind.IN_USE)


def test_custom_policy_changes_buffers():
    policy = BufferPolicy(pre_use=timedelta(hours=1), post_use=timedelta(hours=2))
    m = Mission(scheduled_start=_h(8), scheduled_end=_h(14), resource_id=1)
    pre, in_use, post = derive_windows(m, policy)
    assert pre.end == _h(9)
    assert post.start == _h(12)


def test_from_actual_widens_by_buffers():
    m = Mission.from_actual(dt("2025-01-01T10:00"), dt("2025-01-01T17:00"), resource_id=3)
    assert m.scheduled_start == dt("2025-01-01T07:00")
    assert m.scheduled_end == dt("2025-01-01T20:00")
    assert m.total_usage_hours == 7.0
    assert m.usage_start() == dt("2025-01-01T10:00")


def test_usage_times_fall_back_to_scheduled_minus_buffers(mission_a):
    assert mission_a.usage_start(DEFAULT_POLICY) == dt("2025-01-01T10:00")
    assert mission_a.usage_end(DEFAULT_POLICY) == dt("2025-01-01T18:00")


def test_blocked_windows_sorted_across_missions(mission_a):
    earlier = Mission(id=2, resource_id=1, scheduled_start=dt("2024-12-31T06:00"), scheduled_end=dt("2024-12-31T20:00"))
    windows = blocked_windows([mission_a, earlier])
    assert [w.start for w in windows] == sorted(w.start for w in windows)
    assert windows[0].mission is earlier
    assert len(windows) == 6


def test_stored_mission_too_short_for_policy_gets_clamped_buffers():
    # 5h span under 3h+3h buffers: preparation keeps 3h, maintenance gets the rest
    m = Mission(resource_id=1, scheduled_start=dt("2025-01-01T10:00"), scheduled_end=dt("2025-01-01T15:00"))
    with pytest.raises(InvalidDurationError):
        derive_windows(m)
    windows = derive_windows(m, strict=False)
    assert [(w.kind, w.start, w.end) for w in windows] == [
        (WindowKind.PRE_USE, dt("2025-01-01T10:00"), dt("2025-01-01T13:00")),
        (WindowKind.POST_USE, dt("2025-01-01T13:00"), dt("2025-01-01T15:00")),
    ]


def test_clamping_never_leaves_the_stored_span():
    m = Mission(resource_id=1, scheduled_start=dt("2025-01-01T10:00"), scheduled_end=dt("2025-01-01T12:00"))
    windows = derive_windows(m, strict=False)
    assert [(w.kind, w.start, w.end) for w in windows] == [
        (WindowKind.PRE_USE, dt("2025-01-01T10:00"), dt("2025-01-01T12:00")),
    ]
    reversed_span = Mission(resource_id=1, scheduled_start=dt("2025-01-01T12:00"), scheduled_end=dt("2025-01-01T10:00"))
    assert derive_windows(reversed_span, strict=False) == []
    assert blocked_windows([m, reversed_span]) == windows
