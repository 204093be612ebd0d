"""
Derived view data produced by the adherence calculator.
"""

import datetime as dt
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel

from models.medication import DosageUnitEnum


class SlotStatus(str, Enum):
    PENDING = "pending"
    TAKEN = "taken"
    MISSED = "missed"


class ScheduleEntry(BaseModel):
    medication_id: int
    name: str = ""
    dosage: Optional[float] = None
    # unknown units pass through as plain strings
    unit: Union[DosageUnitEnum, str, None] = None
    scheduled_time: str
    status: SlotStatus


class TodaySchedule(BaseModel):
    date: dt.date
    entries: List[ScheduleEntry] = []
    total_count: int = 0
    taken_count: int = 0
    progress: int = 0
    all_taken: bool = False


class AdherencePoint(BaseModel):
    date: dt.date
    label: str
    adherence: int
    taken: int
    scheduled: int


class StreakResponse(BaseModel):
    streak: int


class AdherenceReport(BaseModel):
    today: TodaySchedule
    adherence: List[AdherencePoint]
    streak: int
    active_medications: int
    daily_doses: int
    overall_adherence: int
