import logging
from datetime import date
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from core.clock import now_utc
from core.exceptions import NotFoundError
from models.dose_event import DoseStatus
from repositories.dose_event import DoseEventRepository
from schemas.dose_event import DoseEventRead
from services.medication import MedicationService

logger = logging.getLogger(__name__)


class DoseTrackingService:
    """Marks scheduled slots as taken or missed and undoes those marks."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.dose_repo = DoseEventRepository(db)
        self.medication_service = MedicationService(db)

    async def _check_slot(self, user_id: int, medication_id: int, scheduled_time: str):
        medication = await self.medication_service.get_user_medication(user_id, medication_id)
        if scheduled_time not in medication.times:
            raise ValueError(
                f"{scheduled_time} is not a reminder time of medication {medication_id}"
            )
        return medication

    async def _record(
        self,
        user_id: int,
        medication_id: int,
        scheduled_time: str,
        day: date,
        status: DoseStatus,
    ) -> DoseEventRead:
        try:
            await self._check_slot(user_id, medication_id, scheduled_time)
            taken_at = now_utc() if status == DoseStatus.TAKEN else None
            event = await self.dose_repo.upsert(
                user_id, medication_id, scheduled_time, day, status, taken_at=taken_at
            )
            logger.info(
                f"User {user_id} marked medication {medication_id} at {day} {scheduled_time} "
                f"as {status.value}"
            )
            return event
        except (ValueError, NotFoundError) as e:
            logger.warning(f"Rejected dose mark for user {user_id}: {e}")
            raise

    async def mark_taken(self, user_id: int, medication_id: int, scheduled_time: str, day: date) -> DoseEventRead:
        return await self._record(user_id, medication_id, scheduled_time, day, DoseStatus.TAKEN)

    async def mark_missed(self, user_id: int, medication_id: int, scheduled_time: str, day: date) -> DoseEventRead:
        return await self._record(user_id, medication_id, scheduled_time, day, DoseStatus.MISSED)

    async def undo(self, user_id: int, medication_id: int, scheduled_time: str, day: date) -> None:
        """
        Remove the recorded outcome for a slot so it reads as pending again.

        Raises:
            NotFoundError: If nothing was recorded for the slot
        """
        deleted = await self.dose_repo.delete_slot(user_id, medication_id, scheduled_time, day)
        if not deleted:
            raise NotFoundError(
                f"No dose recorded for medication {medication_id} at {day} {scheduled_time}"
            )
        logger.info(f"User {user_id} cleared medication {medication_id} at {day} {scheduled_time}")

    async def list_events(self, user_id: int, day: date = None) -> List[DoseEventRead]:
        return await self.dose_repo.get_by_user_id(user_id, day)
