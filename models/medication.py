"""
Medication model for medication management.
"""

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, Float, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from enum import Enum

from core.database import Base


class DosageUnitEnum(str, Enum):
    MG = "mg"
    ML = "ml"
    IU = "IU"
    TABLETS = "tablets"
    CAPSULES = "capsules"


class Medication(Base):
    """Medication model for medication management."""

    __tablename__ = "medications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Medication Information
    name = Column(String(255), nullable=False)
    dosage = Column(Float, nullable=False)
    unit = Column(SQLEnum(DosageUnitEnum, values_callable=lambda e: [m.value for m in e]), nullable=False)
    instructions = Column(Text, nullable=True)  # e.g., "Take with food"
    condition = Column(String(255), nullable=True)

    # Prescription Details
    prescribed_by = Column(String(255), nullable=True)

    # Timing
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)  # None = ongoing

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="medications")
    times_of_day = relationship(
        "MedicationTime",
        back_populates="medication",
        cascade="all, delete-orphan",
        order_by="MedicationTime.position",
        lazy="selectin",
    )
    dose_events = relationship("DoseEvent", back_populates="medication", cascade="all, delete-orphan")

    @property
    def times(self) -> list:
        """Reminder clock-times (HH:MM) in the order they were entered."""
        return [t.time_of_day for t in self.times_of_day]

    def __repr__(self):
        return f"<Medication(id={self.id}, name='{self.name}', user_id={self.user_id})>"


class MedicationTime(Base):
    __tablename__ = "medication_times"

    id = Column(Integer, primary_key=True, index=True)
    medication_id = Column(Integer, ForeignKey("medications.id", ondelete="CASCADE"), nullable=False, index=True)
    time_of_day = Column(String(5), nullable=False)  # zero-padded HH:MM
    position = Column(Integer, nullable=False, default=0)

    medication = relationship("Medication", back_populates="times_of_day")
