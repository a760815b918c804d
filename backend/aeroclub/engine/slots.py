# backend/aeroclub/engine/slots.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from aeroclub.config import BufferPolicy, DEFAULT_POLICY
from aeroclub.engine.availability import next_available_start
from aeroclub.engine.errors import MissingResourceError
from aeroclub.engine.windows import (
    Mission,
    Window,
    WindowKind,
    blocked_windows,
    describe_window,
    overlaps,
    slot_overlaps_window,
)

DAY_MODE = 1
WEEK_MODE = 7


class SlotStatus(str, Enum):
    AVAILABLE = "available"
    IN_USE = "occupied-by-in-use"
    PRE_USE = "occupied-by-pre-use"
    POST_USE = "occupied-by-post-use"
    SELECTED = "selected"
    CONFLICT = "conflicting-with-selection"


STATUS_BY_KIND = {
    WindowKind.PRE_USE: SlotStatus.PRE_USE,
    WindowKind.IN_USE: SlotStatus.IN_USE,
    WindowKind.POST_USE: SlotStatus.POST_USE,
}


@dataclass(frozen=True)
class Slot:
    start: datetime
    end: datetime
    status: SlotStatus = SlotStatus.AVAILABLE
    mission: Optional[Mission] = None
    reason: str = ""
    window_kind: Optional[WindowKind] = None
    next_available: Optional[datetime] = None


def _day_starts(range_start: date, day_count: int) -> List[datetime]:
    first = datetime(range_start.year, range_start.month, range_start.day)
    return [first + timedelta(days=i) for i in range(day_count)]


def _occupying_window(windows: List[Window], start: datetime, end: datetime) -> Optional[Window]:
    for w in windows:
        if slot_overlaps_window(start, end, w):
            return w
    return None


def generate_slots(
    resource_id: Optional[int],
    range_start: date,
    day_count: int,
    existing: Iterable[Mission],
    selection: Optional[Tuple[datetime, datetime]] = None,
    policy: BufferPolicy = DEFAULT_POLICY,
) -> List[Slot]:
    """
    Calendar grid for one aircraft: `day_count` days from `range_start`, one slot
    per `policy.slot_size` from 00:00, in chronological order.

    Each slot takes the status of the first window it touches. A selection
    (the member's picked start/end) marks free slots as selected and occupied
    ones as conflicting; it never frees an occupied slot.
    """
    if resource_id is None:
        raise MissingResourceError("slot grid request")
    if day_count < 1:
        raise ValueError("day_count must be at least 1")

    missions = [m for m in existing if m.resource_id in (None, resource_id)]
    windows = blocked_windows(missions, policy)

    sel_start, sel_end = selection if selection is not None else (None, None)
    per_day = int(timedelta(days=1) / policy.slot_size)

    slots: List[Slot] = []
    for day_start in _day_starts(range_start, day_count):
        for i in range(per_day):
            start = day_start + i * policy.slot_size
            end = start + policy.slot_size

            status = SlotStatus.AVAILABLE
            mission = None
            reason = ""
            kind = None
            next_free = None

            hit = _occupying_window(windows, start, end)
            if hit is not None:
                status = STATUS_BY_KIND[hit.kind]
                mission = hit.mission
                reason = describe_window(hit, policy)
                kind = hit.kind
                if mission is not None:
                    next_free = next_available_start(mission, policy)

            if sel_start is not None and sel_end is not None and overlaps(start, end, sel_start, sel_end):
                status = SlotStatus.SELECTED if status == SlotStatus.AVAILABLE else SlotStatus.CONFLICT

            slots.append(
                Slot(
                    start=start,
                    end=end,
                    status=status,
                    mission=mission,
                    reason=reason,
                    window_kind=kind,
                    next_available=next_free,
                )
            )
    return slots
