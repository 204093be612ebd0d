import datetime as dt
from typing import Optional

from pydantic import BaseModel, field_validator

from models.dose_event import DoseStatus
from schemas.medication import is_valid_hhmm


class DoseMark(BaseModel):
    """Marks one scheduled dose; ``date`` defaults to today."""

    medication_id: int
    scheduled_time: str
    date: Optional[dt.date] = None

    @field_validator("scheduled_time")
    @classmethod
    def time_valid(cls, v: str) -> str:
        if not is_valid_hhmm(v):
            raise ValueError(f"Invalid scheduled time '{v}' (expected HH:MM)")
        return v


class DoseEventRead(BaseModel):
    id: int
    medication_id: int
    scheduled_time: str
    date: dt.date
    status: DoseStatus
    taken_at: Optional[dt.datetime] = None

    model_config = {
        "from_attributes": True
    }
