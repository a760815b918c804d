# backend/aeroclub/schemas/aircraft.py
from typing import Optional
from pydantic import BaseModel
from pydantic.config import ConfigDict


class AircraftCreate(BaseModel):
    registration: str
    model: Optional[str] = None


class AircraftOut(BaseModel):
    id: int
    registration: str
    model: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
