# backend/aeroclub/schemas/common.py
from datetime import datetime
from typing import Optional


def naive_local(value: Optional[datetime]) -> Optional[datetime]:
    """Missions are stored in naive local time; a value carrying a UTC offset is refused."""
    if value is not None and value.utcoffset() is not None:
        raise ValueError("expected a local time without a UTC offset (e.g. 2025-01-01T10:00)")
    return value
