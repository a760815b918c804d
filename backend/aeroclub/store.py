# backend/aeroclub/store.py
# Read side used by every router: the engine only ever sees plain snapshots.
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import select, and_
from sqlalchemy.orm import Session

from aeroclub import engine as core
from aeroclub.models.aircraft import Aircraft
from aeroclub.models.mission import Mission, ACTIVE_STATUSES
from aeroclub.models.schedule_block import ScheduleBlock
from aeroclub.schemas.common import naive_local


def aircraft_or_404(db: Session, aircraft_id: int, lock: bool = False) -> Aircraft:
    """
    Load an aircraft. With lock=True the row is held FOR UPDATE until the
    transaction ends, which serialises validate -> insert per aircraft.
    """
    q = select(Aircraft).where(Aircraft.id == aircraft_id)
    if lock:
        q = q.with_for_update()
    aircraft = db.execute(q).scalar_one_or_none()
    if not aircraft:
        raise HTTPException(status_code=404, detail="Aircraft not found")
    return aircraft


def mission_or_404(db: Session, mission_id: int) -> Mission:
    mission = db.get(Mission, mission_id)
    if not mission:
        raise HTTPException(status_code=404, detail="Mission not found")
    return mission


def active_mission_rows(db: Session, aircraft_id: int, exclude_id: Optional[int] = None) -> List[Mission]:
    conds = [
        Mission.aircraft_id == aircraft_id,
        Mission.status.in_(ACTIVE_STATUSES),
    ]
    if exclude_id is not None:
        conds.append(Mission.id != exclude_id)
    return db.execute(
        select(Mission).where(and_(*conds)).order_by(Mission.scheduled_start, Mission.id)
    ).scalars().all()


def active_missions(db: Session, aircraft_id: int, exclude_id: Optional[int] = None) -> List[core.Mission]:
    return [m.to_engine() for m in active_mission_rows(db, aircraft_id, exclude_id)]


def schedule_blocks(db: Session, aircraft_id: int) -> List[core.ScheduleBlock]:
    rows = db.execute(
        select(ScheduleBlock)
        .where(ScheduleBlock.aircraft_id == aircraft_id)
        .order_by(ScheduleBlock.start_at, ScheduleBlock.id)
    ).scalars().all()
    return [b.to_engine() for b in rows]


def local_time_or_422(value: Optional[datetime], name: str) -> Optional[datetime]:
    try:
        return naive_local(value)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=f"{name}: {e}")
