# backend/aeroclub/models/aircraft.py
from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from aeroclub.db import Base


class Aircraft(Base):
    __tablename__ = "aircraft"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    registration: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    model: Mapped[str | None] = mapped_column(String, nullable=True)

    missions = relationship("Mission", back_populates="aircraft")
