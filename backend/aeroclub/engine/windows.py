# backend/aeroclub/engine/windows.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional

from aeroclub.config import BufferPolicy, DEFAULT_POLICY
from aeroclub.engine.errors import InvalidDurationError


class WindowKind(str, Enum):
    PRE_USE = "pre-use"
    IN_USE = "in-use"
    POST_USE = "post-use"


@dataclass(frozen=True)
class Mission:
    """
    One reservation of an aircraft.

    scheduled_start/scheduled_end include the buffers (04:00 -> 21:00 for a
    07:00 take-off returning at 18:00 with 3h buffers). actual_* are the
    member-selected usage times and may be missing.
    """
    scheduled_start: datetime
    scheduled_end: datetime
    resource_id: Optional[int] = None
    total_usage_hours: float = 0.0
    actual_start: Optional[datetime] = None
    actual_end: Optional[datetime] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    id: Optional[int] = None

    @classmethod
    def from_actual(
        cls,
        actual_start: datetime,
        actual_end: datetime,
        policy: BufferPolicy = DEFAULT_POLICY,
        **kwargs,
    ) -> "Mission":
        """Build a mission around the member's take-off/landing times by adding the buffers."""
        kwargs.setdefault("total_usage_hours", max(0.0, (actual_end - actual_start).total_seconds() / 3600.0))
        return cls(
            scheduled_start=actual_start - policy.pre_use,
            scheduled_end=actual_end + policy.post_use,
            actual_start=actual_start,
            actual_end=actual_end,
            **kwargs,
        )

    def usage_start(self, policy: BufferPolicy = DEFAULT_POLICY) -> datetime:
        return self.actual_start if self.actual_start is not None else self.scheduled_start + policy.pre_use

    def usage_end(self, policy: BufferPolicy = DEFAULT_POLICY) -> datetime:
        return self.actual_end if self.actual_end is not None else self.scheduled_end - policy.post_use

    def route(self) -> str:
        return f"{self.origin or 'N/A'} -> {self.destination or 'N/A'}"


@dataclass(frozen=True)
class Window:
    start: datetime
    end: datetime
    kind: WindowKind
    mission: Optional[Mission] = field(default=None, compare=False)

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return overlaps(self.start, self.end, start, end)


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    # half-open: touching intervals do not overlap
    return (a_start < b_end) and (b_start < a_end)


def slot_overlaps_window(slot_start: datetime, slot_end: datetime, window: Window) -> bool:
    """
    A slot is taken by a window when its start falls inside the window, its
    end falls inside the window, or it contains the window entirely.
    Same answer as overlaps() for any non-empty slot.
    """
    return (
        (window.start <= slot_start < window.end)
        or (window.start < slot_end <= window.end)
        or (slot_start <= window.start and slot_end >= window.end)
    )


def _hours(delta) -> str:
    return f"{delta.total_seconds() / 3600:g}"


def describe_window(window: Window, policy: BufferPolicy = DEFAULT_POLICY) -> str:
    """Human readable reason shown to members for an occupied span."""
    if window.kind == WindowKind.PRE_USE:
        return f"Aircraft preparation (-{_hours(policy.pre_use)}h)"
    if window.kind == WindowKind.POST_USE:
        return f"Post-flight maintenance (+{_hours(policy.post_use)}h)"
    if window.mission is not None:
        return f"Mission in progress: {window.mission.route()}"
    return "Mission in progress"


def derive_windows(
    mission: Mission,
    policy: BufferPolicy = DEFAULT_POLICY,
    strict: bool = True,
) -> List[Window]:
    """
    Split a mission's scheduled span into pre-use, in-use and post-use windows,
    in chronological order and contiguous. A zero buffer yields no window.

    With strict=False (missions already stored, possibly under an older policy)
    a span too short for the buffers is not an error: the buffers are clamped
    to it, preparation first.
    """
    start, end = mission.scheduled_start, mission.scheduled_end
    pre, post = policy.pre_use, policy.post_use
    if end - start < pre + post or end <= start:
        if strict:
            raise InvalidDurationError(mission, pre + post)
        if end <= start:
            return []
        pre = min(pre, end - start)
        post = min(post, end - start - pre)

    in_use_start = start + pre
    in_use_end = end - post

    windows: List[Window] = []
    if pre:
        windows.append(Window(start, in_use_start, WindowKind.PRE_USE, mission))
    if in_use_end > in_use_start:
        windows.append(Window(in_use_start, in_use_end, WindowKind.IN_USE, mission))
    if post:
        windows.append(Window(in_use_end, end, WindowKind.POST_USE, mission))
    return windows


def sort_missions(missions: Iterable[Mission]) -> List[Mission]:
    """Scan order for every conflict search: earliest scheduled start first, then id."""
    return sorted(
        missions,
        key=lambda m: (m.scheduled_start, m.id is None, m.id or 0),
    )


def blocked_windows(missions: Iterable[Mission], policy: BufferPolicy = DEFAULT_POLICY) -> List[Window]:
    """All windows of all missions, sorted by start (stable on mission order)."""
    out: List[Window] = []
    for m in sort_missions(missions):
        out.extend(derive_windows(m, policy, strict=False))
    return sorted(out, key=lambda w: w.start)
