# backend/aeroclub/schemas/schedule.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from aeroclub import engine as core


class ScheduleBlockOut(BaseModel):
    id: Optional[int] = None
    start: datetime
    end: datetime
    kind: str
    description: str
    mission_id: Optional[int] = None

    @classmethod
    def from_block(cls, b: core.ScheduleBlock) -> "ScheduleBlockOut":
        return cls(
            id=b.id,
            start=b.start,
            end=b.end,
            kind=b.kind,
            description=b.description,
            mission_id=b.booking_id,
        )


class FreeSpanOut(BaseModel):
    start: datetime
    end: datetime
    duration_hours: float


class NextFreeOut(BaseModel):
    aircraft_id: int
    desired_start: datetime
    next_free_start: datetime
