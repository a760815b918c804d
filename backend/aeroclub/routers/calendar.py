# backend/aeroclub/routers/calendar.py
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import delete
from sqlalchemy.orm import Session

from aeroclub import engine as core
from aeroclub.config import BufferPolicy, get_policy
from aeroclub.db import get_db
from aeroclub.models.mission import Mission
from aeroclub.models.schedule_block import ScheduleBlock
from aeroclub.schemas.calendar import (
    BlockIn,
    NextAvailableOut,
    SlotGridOut,
    SlotOut,
    SuggestionsOut,
)
from aeroclub.schemas.mission import MissionOut
from aeroclub.store import active_missions, aircraft_or_404, local_time_or_422

router = APIRouter(prefix="/calendar", tags=["calendar"])
logger = logging.getLogger(__name__)


def _parse_day(day_str: str) -> date:
    try:
        return date.fromisoformat(day_str)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid day format; expected YYYY-MM-DD")


@router.get("/{aircraft_id}/slots", response_model=SlotGridOut)
def slot_grid(
    aircraft_id: int,
    start: str = Query(..., description="First day, YYYY-MM-DD"),
    days: int = Query(core.WEEK_MODE, ge=1, le=31, description="1 for day view, 7 for week view"),
    selected_start: Optional[datetime] = Query(None),
    selected_end: Optional[datetime] = Query(None),
    db: Session = Depends(get_db),
    policy: BufferPolicy = Depends(get_policy),
):
    first_day = _parse_day(start)
    selected_start = local_time_or_422(selected_start, "selected_start")
    selected_end = local_time_or_422(selected_end, "selected_end")
    if (selected_start is None) != (selected_end is None):
        raise HTTPException(status_code=400, detail="selected_start and selected_end go together")
    selection = (selected_start, selected_end) if selected_start is not None else None

    aircraft_or_404(db, aircraft_id)
    slots = core.generate_slots(
        aircraft_id,
        first_day,
        days,
        active_missions(db, aircraft_id),
        selection=selection,
        policy=policy,
    )

    occupied = sum(1 for s in slots if s.status != core.SlotStatus.AVAILABLE)
    logger.debug(f"[calendar] aircraft {aircraft_id}: {len(slots)} slots from {first_day}, {occupied} not available")

    return SlotGridOut(
        aircraft_id=aircraft_id,
        start=first_day.isoformat(),
        days=days,
        slots=[SlotOut.from_slot(s) for s in slots],
    )


@router.get("/{aircraft_id}/suggestions", response_model=SuggestionsOut)
def suggest_times(
    aircraft_id: int,
    desired_start: datetime = Query(..., description="Desired start of preparation"),
    usage_hours: float = Query(..., ge=0, description="Flight hours, outbound + return"),
    db: Session = Depends(get_db),
    policy: BufferPolicy = Depends(get_policy),
):
    desired_start = local_time_or_422(desired_start, "desired_start")
    aircraft_or_404(db, aircraft_id)
    suggestions = core.suggest_start_times(
        aircraft_id,
        desired_start,
        usage_hours,
        active_missions(db, aircraft_id),
        policy,
    )
    return SuggestionsOut(aircraft_id=aircraft_id, suggestions=suggestions)


@router.get("/{aircraft_id}/next-available", response_model=NextAvailableOut)
def next_available(
    aircraft_id: int,
    after: datetime = Query(...),
    db: Session = Depends(get_db),
    policy: BufferPolicy = Depends(get_policy),
):
    after = local_time_or_422(after, "after")
    aircraft_or_404(db, aircraft_id)
    nxt = core.next_available_after(after, active_missions(db, aircraft_id), policy)
    return NextAvailableOut(aircraft_id=aircraft_id, after=after, next_available=nxt)


# ---- Administrative blocks ------------------------------------------------

@router.post("/block", response_model=MissionOut, status_code=201)
def block_aircraft(
    payload: BlockIn,
    db: Session = Depends(get_db),
    policy: BufferPolicy = Depends(get_policy),
):
    """
    Take the aircraft out of service for [start, end). The span is stored as a
    "blocked" mission (buffers around it) and as an "unavailable" schedule block.
    """
    aircraft_or_404(db, payload.aircraft_id, lock=True)
    label = (payload.reason or "").strip() or "BLOCKED"
    m = core.Mission.from_actual(payload.start, payload.end, policy)

    row = Mission(
        aircraft_id=payload.aircraft_id,
        origin=label,
        destination=label,
        scheduled_start=m.scheduled_start,
        scheduled_end=m.scheduled_end,
        actual_start=payload.start,
        actual_end=payload.end,
        usage_hours=0.0,
        status="blocked",
    )
    db.add(row)
    db.flush()
    db.add(
        ScheduleBlock(
            aircraft_id=payload.aircraft_id,
            mission_id=row.id,
            start_at=payload.start,
            end_at=payload.end,
            kind="unavailable",
            description=label,
        )
    )
    db.commit()
    db.refresh(row)
    logger.info(f"[calendar] aircraft {payload.aircraft_id} blocked {payload.start} - {payload.end} ({label})")
    return row


@router.delete("/block/{mission_id}", status_code=204)
def unblock_aircraft(mission_id: int, db: Session = Depends(get_db)):
    row = db.get(Mission, mission_id)
    if not row or row.status != "blocked":
        raise HTTPException(status_code=404, detail="Block not found")
    db.execute(delete(ScheduleBlock).where(ScheduleBlock.mission_id == mission_id))
    db.delete(row)
    db.commit()
    return None
