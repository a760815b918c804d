# backend/aeroclub/routers/aircraft.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from aeroclub.db import get_db
from aeroclub.models.aircraft import Aircraft
from aeroclub.schemas.aircraft import AircraftCreate, AircraftOut

router = APIRouter(prefix="/aircraft", tags=["aircraft"])


@router.get("", response_model=List[AircraftOut])
def list_aircraft(db: Session = Depends(get_db)):
    return db.scalars(select(Aircraft).order_by(Aircraft.id)).all()


@router.post("", response_model=AircraftOut, status_code=201)
def create_aircraft(payload: AircraftCreate, db: Session = Depends(get_db)):
    registration = payload.registration.strip().upper()
    if not registration:
        raise HTTPException(status_code=400, detail="Registration required")
    row = Aircraft(registration=registration, model=payload.model)
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Aircraft registration already exists")
    db.refresh(row)
    return row
