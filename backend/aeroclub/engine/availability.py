# backend/aeroclub/engine/availability.py
from __future__ import annotations

from datetime import datetime
from typing import Iterable

from aeroclub.config import BufferPolicy, DEFAULT_POLICY
from aeroclub.engine.windows import Mission


def next_available_start(mission: Mission, policy: BufferPolicy = DEFAULT_POLICY) -> datetime:
    """
    Earliest scheduled start (i.e. start of its own preparation window) another
    mission may have on the same aircraft after `mission`.
    """
    return mission.scheduled_end + policy.next_mission_gap


def next_available_after(
    after: datetime,
    existing: Iterable[Mission],
    policy: BufferPolicy = DEFAULT_POLICY,
) -> datetime:
    """
    Next free start at or after `after`: decided by the first mission (by
    scheduled end) still occupying the aircraft after that instant.
    """
    pending = sorted(
        (m for m in existing if m.scheduled_end > after),
        key=lambda m: (m.scheduled_end, m.scheduled_start),
    )
    if not pending:
        return after
    return next_available_start(pending[0], policy)
