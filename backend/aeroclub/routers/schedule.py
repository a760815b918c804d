# backend/aeroclub/routers/schedule.py
from datetime import datetime
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from aeroclub import engine as core
from aeroclub.engine.schedule_index import DEFAULT_MIN_HOURS
from aeroclub.db import get_db
from aeroclub.schemas.schedule import FreeSpanOut, NextFreeOut, ScheduleBlockOut
from aeroclub.store import aircraft_or_404, local_time_or_422, schedule_blocks

router = APIRouter(prefix="/schedule", tags=["schedule"])


def _check_range(start: datetime, end: datetime) -> Tuple[datetime, datetime]:
    start = local_time_or_422(start, "start")
    end = local_time_or_422(end, "end")
    if end <= start:
        raise HTTPException(status_code=400, detail="end must be after start")
    return start, end


@router.get("/{aircraft_id}/conflicts", response_model=List[ScheduleBlockOut])
def conflicts(
    aircraft_id: int,
    start: datetime = Query(...),
    end: datetime = Query(...),
    exclude_mission_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    """Raw schedule blocks (no buffers) colliding with [start, end)."""
    start, end = _check_range(start, end)
    aircraft_or_404(db, aircraft_id)
    hits = core.find_conflicts(schedule_blocks(db, aircraft_id), start, end, exclude_booking_id=exclude_mission_id)
    return [ScheduleBlockOut.from_block(b) for b in hits]


@router.get("/{aircraft_id}/free-spans", response_model=List[FreeSpanOut])
def free_spans(
    aircraft_id: int,
    start: datetime = Query(...),
    end: datetime = Query(...),
    min_hours: float = Query(DEFAULT_MIN_HOURS, gt=0),
    db: Session = Depends(get_db),
):
    start, end = _check_range(start, end)
    aircraft_or_404(db, aircraft_id)
    spans = core.find_free_spans(schedule_blocks(db, aircraft_id), start, end, min_duration_hours=min_hours)
    return [FreeSpanOut(start=s.start, end=s.end, duration_hours=s.duration_hours) for s in spans]


@router.get("/{aircraft_id}/next-free", response_model=NextFreeOut)
def next_free(
    aircraft_id: int,
    desired_start: datetime = Query(...),
    duration_hours: float = Query(..., gt=0),
    db: Session = Depends(get_db),
):
    desired_start = local_time_or_422(desired_start, "desired_start")
    aircraft_or_404(db, aircraft_id)
    found = core.find_next_free_start(schedule_blocks(db, aircraft_id), desired_start, duration_hours)
    return NextFreeOut(aircraft_id=aircraft_id, desired_start=desired_start, next_free_start=found)
