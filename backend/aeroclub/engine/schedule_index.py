# backend/aeroclub/engine/schedule_index.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from aeroclub.config import BufferPolicy, UNBUFFERED_POLICY
from aeroclub.engine.errors import NoAvailabilityError

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 30
DEFAULT_MIN_HOURS = 2.0


@dataclass(frozen=True)
class ScheduleBlock:
    """A raw lock on an aircraft's timeline: no preparation or maintenance buffers."""
    start: datetime
    end: datetime
    kind: str = "booking"  # booking | maintenance | unavailable
    description: str = "Schedule block"
    booking_id: Optional[int] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class FreeSpan:
    start: datetime
    end: datetime

    @property
    def duration_hours(self) -> float:
        return (self.end - self.start).total_seconds() / 3600.0


def block_conflicts(block: ScheduleBlock, start: datetime, end: datetime) -> bool:
    """
    The block starts inside [start, end), ends inside it, or covers it.
    Agrees with overlaps() for non-empty spans.
    """
    return (
        (start <= block.start < end)
        or (start < block.end <= end)
        or (block.start <= start and block.end >= end)
    )


def find_conflicts(
    blocks: Iterable[ScheduleBlock],
    start: datetime,
    end: datetime,
    exclude_booking_id: Optional[int] = None,
) -> List[ScheduleBlock]:
    hits = [
        b for b in blocks
        if block_conflicts(b, start, end)
        and (exclude_booking_id is None or b.booking_id != exclude_booking_id)
    ]
    return sorted(hits, key=lambda b: (b.start, b.end))


def _step(policy: BufferPolicy) -> timedelta:
    # the cursor resumes one slot after a block, plus the gap when buffered
    return policy.slot_size + policy.next_mission_gap


def find_free_spans(
    blocks: Iterable[ScheduleBlock],
    range_start: datetime,
    range_end: datetime,
    min_duration_hours: float = DEFAULT_MIN_HOURS,
    policy: BufferPolicy = UNBUFFERED_POLICY,
) -> List[FreeSpan]:
    """Gaps of at least `min_duration_hours` between the blocks touching [range_start, range_end]."""
    minimum = timedelta(hours=min_duration_hours)
    touching = sorted(
        (b for b in blocks if b.start <= range_end and b.end >= range_start),
        key=lambda b: (b.start, b.end),
    )

    spans: List[FreeSpan] = []
    cursor = range_start
    for b in touching:
        if cursor < b.start and b.start - cursor >= minimum:
            spans.append(FreeSpan(cursor, min(b.start, range_end)))
        cursor = max(cursor, b.end + _step(policy))

    if cursor < range_end and range_end - cursor >= minimum:
        spans.append(FreeSpan(cursor, range_end))
    return spans


def find_next_free_start(
    blocks: Iterable[ScheduleBlock],
    desired_start: datetime,
    duration_hours: float,
    max_attempts: int = MAX_ATTEMPTS,
    policy: BufferPolicy = UNBUFFERED_POLICY,
) -> datetime:
    """
    First start at or after `desired_start` where a `duration_hours` mission hits
    no block. Each conflict moves the candidate past the last conflicting block.
    """
    items = list(blocks)
    duration = timedelta(hours=duration_hours)
    current = desired_start
    for attempt in range(max_attempts):
        conflicts = find_conflicts(items, current, current + duration)
        if not conflicts:
            return current
        last = max(conflicts, key=lambda b: b.end)
        current = max(current, last.end) + _step(policy)
        logger.debug(f"[schedule] attempt {attempt + 1}: blocked until {last.end}, retrying at {current}")
    raise NoAvailabilityError(max_attempts)
