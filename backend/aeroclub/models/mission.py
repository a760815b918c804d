# backend/aeroclub/models/mission.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from aeroclub.db import Base
from aeroclub import engine as core

# statuses that hold the aircraft; "cancelled" frees it
ACTIVE_STATUSES = ("pending", "confirmed", "paid", "blocked")


class Mission(Base):
    __tablename__ = "missions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    aircraft_id: Mapped[int] = mapped_column(ForeignKey("aircraft.id"), nullable=False)
    origin: Mapped[str] = mapped_column(String, nullable=False)
    destination: Mapped[str] = mapped_column(String, nullable=False)

    # buffer-inclusive bounds: start of preparation, end of maintenance
    scheduled_start: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    scheduled_end: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    # member-selected take-off / landing
    actual_start: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    actual_end: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)

    usage_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        default=lambda: datetime.now(),
        nullable=False
    )

    __table_args__ = (
        Index("ix_missions_aircraft_status_start", "aircraft_id", "status", "scheduled_start"),
    )

    aircraft = relationship("Aircraft", back_populates="missions")

    def to_engine(self) -> core.Mission:
        return core.Mission(
            id=self.id,
            resource_id=self.aircraft_id,
            scheduled_start=self.scheduled_start,
            scheduled_end=self.scheduled_end,
            actual_start=self.actual_start,
            actual_end=self.actual_end,
            total_usage_hours=self.usage_hours or 0.0,
            origin=self.origin,
            destination=self.destination,
        )
