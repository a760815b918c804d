# backend/aeroclub/schemas/mission.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.config import ConfigDict

from aeroclub import engine as core
from aeroclub.config import BufferPolicy
from aeroclub.schemas.common import naive_local


class MissionProposal(BaseModel):
    """
    A member's proposed mission. Either the take-off/landing times
    (actual_start/actual_end, buffers are added) or the buffer-inclusive
    scheduled bounds may be given.
    """
    aircraft_id: Optional[int] = None
    origin: str = ""
    destination: str = ""
    actual_start: Optional[datetime] = None
    actual_end: Optional[datetime] = None
    scheduled_start: Optional[datetime] = None
    scheduled_end: Optional[datetime] = None
    usage_hours: Optional[float] = Field(None, ge=0)

    @field_validator("actual_start", "actual_end", "scheduled_start", "scheduled_end")
    @classmethod
    def _local_times(cls, value):
        return naive_local(value)

    @model_validator(mode="after")
    def _one_pair_of_times(self):
        has_actual = self.actual_start is not None and self.actual_end is not None
        has_scheduled = self.scheduled_start is not None and self.scheduled_end is not None
        if not (has_actual or has_scheduled):
            raise ValueError("give actual_start/actual_end or scheduled_start/scheduled_end")
        return self

    def to_engine(self, policy: BufferPolicy) -> core.Mission:
        extra = dict(
            resource_id=self.aircraft_id,
            origin=self.origin or None,
            destination=self.destination or None,
        )
        if self.usage_hours is not None:
            extra["total_usage_hours"] = self.usage_hours

        if self.scheduled_start is not None and self.scheduled_end is not None:
            actual_start = self.actual_start or self.scheduled_start + policy.pre_use
            actual_end = self.actual_end or self.scheduled_end - policy.post_use
            extra.setdefault(
                "total_usage_hours",
                max(0.0, (actual_end - actual_start).total_seconds() / 3600.0),
            )
            return core.Mission(
                scheduled_start=self.scheduled_start,
                scheduled_end=self.scheduled_end,
                actual_start=self.actual_start,
                actual_end=self.actual_end,
                **extra,
            )
        return core.Mission.from_actual(self.actual_start, self.actual_end, policy, **extra)


class MissionRef(BaseModel):
    id: Optional[int] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    scheduled_start: datetime
    scheduled_end: datetime

    @classmethod
    def from_engine(cls, m: core.Mission) -> "MissionRef":
        return cls(
            id=m.id,
            origin=m.origin,
            destination=m.destination,
            scheduled_start=m.scheduled_start,
            scheduled_end=m.scheduled_end,
        )


class ValidationOut(BaseModel):
    accepted: bool
    message: str
    reason: str
    suggested_start: Optional[datetime] = None
    next_available_start: Optional[datetime] = None
    conflicting_mission: Optional[MissionRef] = None

    @classmethod
    def from_result(cls, r: core.ValidationResult) -> "ValidationOut":
        return cls(
            accepted=r.accepted,
            message=r.message,
            reason=r.reason.value,
            suggested_start=r.suggested_start,
            next_available_start=r.next_available_start,
            conflicting_mission=MissionRef.from_engine(r.conflicting_mission) if r.conflicting_mission else None,
        )


class MissionOut(BaseModel):
    id: int
    aircraft_id: int
    origin: str
    destination: str
    scheduled_start: datetime
    scheduled_end: datetime
    actual_start: Optional[datetime] = None
    actual_end: Optional[datetime] = None
    usage_hours: float
    status: str

    model_config = ConfigDict(from_attributes=True)
