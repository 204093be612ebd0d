"""
SQLAlchemy ORM models for MediTrack Backend.

Contains all database models organized by module.
"""

from .user import User
from .authentication import UserSession
from .medication import Medication, MedicationTime, DosageUnitEnum
from .dose_event import DoseEvent, DoseStatus

__all__ = [
    "User",
    "UserSession",
    "Medication",
    "MedicationTime",
    "DosageUnitEnum",
    "DoseEvent",
    "DoseStatus",
]
