import logging
from datetime import date
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from repositories.dose_event import DoseEventRepository
from repositories.medication import MedicationRepository
from schemas.report import AdherencePoint, AdherenceReport, TodaySchedule
from services import adherence

logger = logging.getLogger(__name__)


class ReportService:
    """Loads a user's medications and dose history and runs the calculator over them."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.medication_repo = MedicationRepository(db)
        self.dose_repo = DoseEventRepository(db)
        self.respect_dates = settings.RESPECT_MEDICATION_DATES

    async def _load(self, user_id: int):
        medications = await self.medication_repo.get_by_user_id(user_id)
        events = await self.dose_repo.get_by_user_id(user_id)
        logger.debug(f"Loaded {len(medications)} medications and {len(events)} dose events for user {user_id}")
        return medications, events

    async def today_schedule(self, user_id: int, today: date) -> TodaySchedule:
        medications, events = await self._load(user_id)
        return adherence.todays_schedule(medications, events, today, respect_dates=self.respect_dates)

    async def adherence_series(self, user_id: int, today: date) -> List[AdherencePoint]:
        medications, events = await self._load(user_id)
        return adherence.adherence_series(medications, events, today, respect_dates=self.respect_dates)

    async def streak(self, user_id: int, today: date) -> int:
        events = await self.dose_repo.get_by_user_id(user_id)
        return adherence.current_streak(events, today)

    async def summary(self, user_id: int, today: date) -> AdherenceReport:
        medications, events = await self._load(user_id)
        report = adherence.build_report(medications, events, today, respect_dates=self.respect_dates)
        logger.info(
            f"Report for user {user_id}: {report.today.taken_count}/{report.today.total_count} today, "
            f"streak {report.streak}, overall {report.overall_adherence}%"
        )
        return report
