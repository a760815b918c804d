# backend/aeroclub/routers/missions.py
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import delete
from sqlalchemy.orm import Session

from aeroclub import engine as core
from aeroclub.config import BufferPolicy, get_policy
from aeroclub.db import get_db
from aeroclub.models.mission import Mission
from aeroclub.models.schedule_block import ScheduleBlock
from aeroclub.schemas.mission import MissionOut, MissionProposal, ValidationOut
from aeroclub.store import (
    active_mission_rows,
    active_missions,
    aircraft_or_404,
    mission_or_404,
    schedule_blocks,
)

router = APIRouter(prefix="/missions", tags=["missions"])
logger = logging.getLogger(__name__)


def _require_aircraft(payload: MissionProposal) -> int:
    if payload.aircraft_id is None:
        raise core.MissingResourceError("proposed mission")
    return payload.aircraft_id


def _rejected(result: core.ValidationResult) -> HTTPException:
    return HTTPException(status_code=409, detail=ValidationOut.from_result(result).model_dump(mode="json"))


# ----------------------------------------------------------------------
# Validation
# ----------------------------------------------------------------------
@router.post("/validate", response_model=ValidationOut)
def validate_mission(
    payload: MissionProposal,
    db: Session = Depends(get_db),
    policy: BufferPolicy = Depends(get_policy),
):
    """Dry run: would this proposal be granted right now? 409 carries the reason."""
    aircraft_id = _require_aircraft(payload)
    aircraft_or_404(db, aircraft_id)
    result = core.validate_mission(payload.to_engine(policy), active_missions(db, aircraft_id), policy)
    if not result.accepted:
        raise _rejected(result)
    return ValidationOut.from_result(result)


# ----------------------------------------------------------------------
# Missions CRUD
# ----------------------------------------------------------------------
@router.get("", response_model=List[MissionOut])
def list_missions(
    aircraft_id: int = Query(..., ge=1),
    db: Session = Depends(get_db),
):
    """Missions currently holding the aircraft, earliest first."""
    aircraft_or_404(db, aircraft_id)
    return active_mission_rows(db, aircraft_id)


@router.post("", response_model=MissionOut, status_code=201)
def create_mission(
    payload: MissionProposal,
    db: Session = Depends(get_db),
    policy: BufferPolicy = Depends(get_policy),
):
    """
    Validate and insert in one transaction. The aircraft row stays locked from
    the existing-missions read until commit, so two concurrent proposals for the
    same aircraft cannot both pass against the same snapshot.
    """
    aircraft_id = _require_aircraft(payload)
    proposed = payload.to_engine(policy)
    try:
        aircraft_or_404(db, aircraft_id, lock=True)
        result = core.validate_mission(proposed, active_missions(db, aircraft_id), policy)
        if not result.accepted:
            raise _rejected(result)

        row = Mission(
            aircraft_id=aircraft_id,
            origin=payload.origin.strip(),
            destination=payload.destination.strip(),
            scheduled_start=proposed.scheduled_start,
            scheduled_end=proposed.scheduled_end,
            actual_start=proposed.usage_start(policy),
            actual_end=proposed.usage_end(policy),
            usage_hours=proposed.total_usage_hours,
            status="pending",
        )
        db.add(row)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(row)
    logger.info(f"[missions] created mission {row.id} on aircraft {aircraft_id} ({row.scheduled_start} - {row.scheduled_end})")
    return row


@router.post("/{mission_id}/confirm", response_model=MissionOut)
def confirm_mission(mission_id: int, db: Session = Depends(get_db)):
    """Confirm a pending mission and lock its span in the schedule index."""
    mission = mission_or_404(db, mission_id)
    if mission.status not in ("pending", "paid"):
        raise HTTPException(status_code=400, detail=f"Mission is {mission.status}; only pending or paid missions can be confirmed")

    conflicts = core.find_conflicts(
        schedule_blocks(db, mission.aircraft_id),
        mission.scheduled_start,
        mission.scheduled_end,
        exclude_booking_id=mission.id,
    )
    if conflicts:
        first = conflicts[0]
        raise HTTPException(
            status_code=409,
            detail=f"Schedule already blocked {first.start.isoformat()} - {first.end.isoformat()} ({first.description})",
        )

    mission.status = "confirmed"
    db.add(
        ScheduleBlock(
            aircraft_id=mission.aircraft_id,
            mission_id=mission.id,
            start_at=mission.scheduled_start,
            end_at=mission.scheduled_end,
            kind="booking",
            description=f"Mission {mission.origin} -> {mission.destination}",
        )
    )
    db.commit()
    db.refresh(mission)
    return mission


@router.delete("/{mission_id}", status_code=204)
def cancel_mission(mission_id: int, db: Session = Depends(get_db)):
    """Cancel a mission and release its schedule block; the aircraft is free again."""
    mission = mission_or_404(db, mission_id)
    if mission.status == "blocked":
        raise HTTPException(status_code=400, detail="Administrative blocks are removed via /calendar/block")
    mission.status = "cancelled"
    db.execute(delete(ScheduleBlock).where(ScheduleBlock.mission_id == mission_id))
    db.commit()
    return None
