import re
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from models.medication import DosageUnitEnum

_TIME_RE = re.compile(r"^\d{2}:\d{2}$")


def is_valid_hhmm(value: str) -> bool:
    if not isinstance(value, str) or not _TIME_RE.match(value):
        return False
    hh, mm = (int(x) for x in value.split(":", 1))
    return 0 <= hh <= 23 and 0 <= mm <= 59


class MedicationBase(BaseModel):
    name: str
    dosage: float
    unit: DosageUnitEnum = DosageUnitEnum.MG
    times: List[str] = Field(default_factory=lambda: ["08:00"])
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    instructions: Optional[str] = None
    condition: Optional[str] = None
    prescribed_by: Optional[str] = None


class MedicationCreate(MedicationBase):
    """Payload of the add-medication form."""

    is_ongoing: bool = False

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Medication name is required")
        return v

    @field_validator("dosage")
    @classmethod
    def dosage_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Dosage must be greater than zero")
        return v

    @field_validator("times")
    @classmethod
    def times_valid(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("At least one reminder time is required")
        seen = set()
        for t in v:
            if not is_valid_hhmm(t):
                raise ValueError(f"Invalid reminder time '{t}' (expected HH:MM)")
            if t in seen:
                raise ValueError(f"Duplicate reminder time '{t}'")
            seen.add(t)
        return v

    @field_validator("instructions", "condition", "prescribed_by")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @model_validator(mode="after")
    def check_dates(self):
        if self.is_ongoing:
            self.end_date = None
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date cannot be before start date")
        return self


class MedicationRead(MedicationBase):
    id: int
    user_id: int
    start_date: date
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }
