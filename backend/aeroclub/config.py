# backend/aeroclub/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache

# Defaults for the club fleet: 3h preparation, 3h maintenance, 3h before the next take-off
PRE_USE_HOURS = 3
POST_USE_HOURS = 3
NEXT_MISSION_GAP_HOURS = 3
SLOT_MINUTES = 30


@dataclass(frozen=True)
class BufferPolicy:
    """
    Buffers an aircraft needs around each mission.

    pre_use / post_use carve the preparation and maintenance windows out of a
    mission's scheduled span; next_mission_gap is added after the scheduled end
    to get the earliest start of the following mission.
    """
    pre_use: timedelta = timedelta(hours=PRE_USE_HOURS)
    post_use: timedelta = timedelta(hours=POST_USE_HOURS)
    next_mission_gap: timedelta = timedelta(hours=NEXT_MISSION_GAP_HOURS)
    slot_size: timedelta = timedelta(minutes=SLOT_MINUTES)

    def __post_init__(self):
        for name in ("pre_use", "post_use", "next_mission_gap"):
            if getattr(self, name) < timedelta(0):
                raise ValueError(f"{name} must not be negative")
        if self.slot_size <= timedelta(0) or timedelta(days=1) % self.slot_size:
            raise ValueError("slot_size must divide a day evenly")

    @property
    def buffered(self) -> bool:
        return bool(self.pre_use or self.post_use or self.next_mission_gap)

    @classmethod
    def unbuffered(cls) -> "BufferPolicy":
        return cls(pre_use=timedelta(0), post_use=timedelta(0), next_mission_gap=timedelta(0))


DEFAULT_POLICY = BufferPolicy()
UNBUFFERED_POLICY = BufferPolicy.unbuffered()


def _hours_from_env(name: str, default: float) -> timedelta:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return timedelta(hours=default)
    try:
        return timedelta(hours=float(raw))
    except ValueError:
        raise ValueError(f"{name} must be a number of hours, got {raw!r}")


def policy_from_env() -> BufferPolicy:
    slot_minutes = os.getenv("AEROCLUB_SLOT_MINUTES")
    return BufferPolicy(
        pre_use=_hours_from_env("AEROCLUB_PRE_USE_HOURS", PRE_USE_HOURS),
        post_use=_hours_from_env("AEROCLUB_POST_USE_HOURS", POST_USE_HOURS),
        next_mission_gap=_hours_from_env("AEROCLUB_NEXT_MISSION_GAP_HOURS", NEXT_MISSION_GAP_HOURS),
        slot_size=timedelta(minutes=int(slot_minutes)) if slot_minutes else timedelta(minutes=SLOT_MINUTES),
    )


# FastAPI dependency
@lru_cache(maxsize=1)
def get_policy() -> BufferPolicy:
    return policy_from_env()
