"""
Browser local-storage blob format: ``{"medications": [...], "doseHistory": [...]}``.

Field names are camelCase, exactly as the web client persisted them. The
client saved cleared inputs as ``""`` and blank numbers as ``null``, so the
models here accept those and leave real validation to the import service,
which skips the records it cannot use.
"""

import datetime as dt
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True)


class LegacyMedication(_CamelModel):
    id: str
    name: Optional[str] = None
    dosage: Optional[float] = None
    unit: Optional[str] = None
    times: List[str] = []
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    instructions: Optional[str] = None
    condition: Optional[str] = None
    prescribed_by: Optional[str] = None

    @field_validator("dosage", "start_date", "end_date", mode="before")
    @classmethod
    def blank_fields(cls, v):
        return _blank_to_none(v)


class LegacyDoseEntry(_CamelModel):
    medication_id: str
    scheduled_time: Optional[str] = None
    taken_at: Optional[dt.datetime] = None
    date: Optional[dt.date] = None
    # older records carry no status; the dashboard counted those as taken
    status: Optional[str] = None

    @field_validator("scheduled_time", "taken_at", "date", "status", mode="before")
    @classmethod
    def blank_fields(cls, v):
        return _blank_to_none(v)


class UserDataBlob(_CamelModel):
    medications: List[LegacyMedication] = Field(default_factory=list)
    dose_history: List[LegacyDoseEntry] = Field(default_factory=list)


class ImportResult(BaseModel):
    medications_imported: int = 0
    medications_skipped: int = 0
    doses_imported: int = 0
    doses_skipped: int = 0
