# backend/aeroclub/schemas/__init__.py

# Aircraft
from .aircraft import AircraftCreate, AircraftOut

# Missions
from .mission import (
    MissionProposal,
    MissionRef,
    MissionOut,
    ValidationOut,
)

# Calendar
from .calendar import (
    BlockIn,
    NextAvailableOut,
    SlotGridOut,
    SlotOut,
    SuggestionsOut,
)

# Schedule index
from .schedule import FreeSpanOut, NextFreeOut, ScheduleBlockOut

__all__ = [
    "AircraftCreate", "AircraftOut",
    "MissionProposal", "MissionRef", "MissionOut", "ValidationOut",
    "BlockIn", "NextAvailableOut", "SlotGridOut", "SlotOut", "SuggestionsOut",
    "FreeSpanOut", "NextFreeOut", "ScheduleBlockOut",
]
