# backend/aeroclub/engine/__init__.py
# Pure scheduling core: no I/O, no database, no HTTP.
from .errors import EngineError, InvalidDurationError, MissingResourceError, NoAvailabilityError
from .windows import (
    Mission,
    Window,
    WindowKind,
    blocked_windows,
    derive_windows,
    describe_window,
    overlaps,
    slot_overlaps_window,
)
from .availability import next_available_after, next_available_start
from .validator import (
    RejectReason,
    ValidationResult,
    suggest_start_times,
    validate_mission,
    validate_start,
)
from .slots import DAY_MODE, WEEK_MODE, Slot, SlotStatus, generate_slots
from .schedule_index import (
    FreeSpan,
    ScheduleBlock,
    find_conflicts,
    find_free_spans,
    find_next_free_start,
)

__all__ = [
    "EngineError", "InvalidDurationError", "MissingResourceError", "NoAvailabilityError",
    "Mission", "Window", "WindowKind",
    "blocked_windows", "derive_windows", "describe_window", "overlaps", "slot_overlaps_window",
    "next_available_after", "next_available_start",
    "RejectReason", "ValidationResult", "suggest_start_times", "validate_mission", "validate_start",
    "DAY_MODE", "WEEK_MODE", "Slot", "SlotStatus", "generate_slots",
    "FreeSpan", "ScheduleBlock", "find_conflicts", "find_free_spans", "find_next_free_start",
]
