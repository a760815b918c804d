# backend/aeroclub/schemas/calendar.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, field_validator

from aeroclub import engine as core
from aeroclub.schemas.common import naive_local
from aeroclub.schemas.mission import MissionRef


class SlotOut(BaseModel):
    start: datetime
    end: datetime
    status: str
    reason: str = ""
    window_kind: Optional[str] = None
    mission: Optional[MissionRef] = None
    next_available: Optional[datetime] = None

    @classmethod
    def from_slot(cls, s: core.Slot) -> "SlotOut":
        return cls(
            start=s.start,
            end=s.end,
            status=s.status.value,
            reason=s.reason,
            window_kind=s.window_kind.value if s.window_kind else None,
            mission=MissionRef.from_engine(s.mission) if s.mission else None,
            next_available=s.next_available,
        )


class SlotGridOut(BaseModel):
    aircraft_id: int
    start: str
    days: int
    slots: List[SlotOut]


class SuggestionsOut(BaseModel):
    aircraft_id: int
    suggestions: List[datetime]


class NextAvailableOut(BaseModel):
    aircraft_id: int
    after: datetime
    next_available: datetime


class BlockIn(BaseModel):
    aircraft_id: int
    start: datetime
    end: datetime
    reason: Optional[str] = None

    @field_validator("start")
    @classmethod
    def _local_start(cls, start):
        return naive_local(start)

    @field_validator("end")
    @classmethod
    def _end_after_start(cls, end, info):
        end = naive_local(end)
        start = info.data.get("start")
        if start is not None and end <= start:
            raise ValueError("end must be after start")
        return end
