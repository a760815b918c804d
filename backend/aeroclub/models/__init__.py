# backend/aeroclub/models/__init__.py
from aeroclub.db import Base

# import all model modules so tables get registered on Base.metadata
from .aircraft import Aircraft
from .mission import Mission, ACTIVE_STATUSES
from .schedule_block import ScheduleBlock


__all__ = [
    "Base",
    "Aircraft",
    "Mission",
    "ACTIVE_STATUSES",
    "ScheduleBlock",
]
