"""
Dose event model: the recorded outcome of one scheduled dose.
"""

from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from enum import Enum as PyEnum

from core.database import Base


class DoseStatus(str, PyEnum):
    TAKEN = "taken"
    MISSED = "missed"


class DoseEvent(Base):
    """One outcome per (medication, scheduled time, calendar date)."""

    __tablename__ = "dose_events"
    __table_args__ = (
        UniqueConstraint("medication_id", "scheduled_time", "date", name="uq_dose_event_slot"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    medication_id = Column(Integer, ForeignKey("medications.id", ondelete="CASCADE"), nullable=False, index=True)
    scheduled_time = Column(String(5), nullable=False)
    date = Column(Date, nullable=False, index=True)
    status = Column(SQLEnum(DoseStatus, values_callable=lambda e: [m.value for m in e]), nullable=False)
    taken_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="dose_events")
    medication = relationship("Medication", back_populates="dose_events")

    def __repr__(self):
        return (
            f"<DoseEvent(id={self.id}, medication_id={self.medication_id}, "
            f"slot='{self.date} {self.scheduled_time}', status='{self.status}')>"
        )


__all__ = ["DoseEvent", "DoseStatus"]
