# backend/aeroclub/models/schedule_block.py
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from aeroclub.db import Base
from aeroclub import engine as core


class ScheduleBlock(Base):
    __tablename__ = "schedule_blocks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    aircraft_id: Mapped[int] = mapped_column(ForeignKey("aircraft.id"), nullable=False)
    mission_id: Mapped[int | None] = mapped_column(
        ForeignKey("missions.id", ondelete="CASCADE"), nullable=True, index=True
    )
    start_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    end_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    kind: Mapped[str] = mapped_column(String, nullable=False, default="booking")
    description: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        Index("ix_schedule_blocks_aircraft_time", "aircraft_id", "start_at", "end_at"),
    )

    def to_engine(self) -> core.ScheduleBlock:
        return core.ScheduleBlock(
            id=self.id,
            start=self.start_at,
            end=self.end_at,
            kind=self.kind,
            description=self.description or "Schedule block",
            booking_id=self.mission_id,
        )
