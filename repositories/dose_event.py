import logging
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import select, delete, and_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from models.dose_event import DoseEvent, DoseStatus
from repositories.base import BaseRepository
from schemas.dose_event import DoseEventRead

logger = logging.getLogger(__name__)


class DoseEventRepository(BaseRepository[DoseEvent]):
    """Dose events, at most one per (medication, scheduled time, date)."""

    def __init__(self, db_session: AsyncSession):
        super().__init__(DoseEvent, db_session)
        self.db_session = db_session

    def _slot_filter(self, medication_id: int, scheduled_time: str, day: date):
        return and_(
            DoseEvent.medication_id == medication_id,
            DoseEvent.scheduled_time == scheduled_time,
            DoseEvent.date == day,
        )

    async def get_slot(self, medication_id: int, scheduled_time: str, day: date) -> Optional[DoseEvent]:
        result = await self.db_session.execute(
            select(DoseEvent).where(self._slot_filter(medication_id, scheduled_time, day))
        )
        return result.scalar_one_or_none()

    async def upsert(
        self,
        user_id: int,
        medication_id: int,
        scheduled_time: str,
        day: date,
        status: DoseStatus,
        taken_at: Optional[datetime] = None,
        commit: bool = True,
    ) -> DoseEventRead:
        """Record the outcome for a slot, replacing any earlier outcome."""
        try:
            event = await self.get_slot(medication_id, scheduled_time, day)
            if event is None:
                event = DoseEvent(
                    user_id=user_id,
                    medication_id=medication_id,
                    scheduled_time=scheduled_time,
                    date=day,
                )
                self.db_session.add(event)
            else:
                logger.debug(
                    f"Replacing {event.status} with {status.value} for medication {medication_id} "
                    f"at {day} {scheduled_time}"
                )
            event.status = status
            event.taken_at = taken_at if status == DoseStatus.TAKEN else None

            if commit:
                await self.db_session.commit()
                await self.db_session.refresh(event)
            else:
                await self.db_session.flush()
            return DoseEventRead.model_validate(event)

        except IntegrityError:
            if not commit:
                raise
            # another request created the slot first; overwrite it
            await self.db_session.rollback()
            logger.warning(f"Concurrent write on slot {medication_id} {day} {scheduled_time}, retrying")
            event = await self.get_slot(medication_id, scheduled_time, day)
            if event is None:
                raise
            event.status = status
            event.taken_at = taken_at if status == DoseStatus.TAKEN else None
            await self.db_session.commit()
            await self.db_session.refresh(event)
            return DoseEventRead.model_validate(event)
        except SQLAlchemyError as e:
            if commit:
                await self.db_session.rollback()
            logger.error(f"Error recording dose for medication {medication_id}: {e}")
            raise

    async def delete_slot(self, user_id: int, medication_id: int, scheduled_time: str, day: date) -> bool:
        try:
            result = await self.db_session.execute(
                delete(DoseEvent).where(
                    DoseEvent.user_id == user_id,
                    self._slot_filter(medication_id, scheduled_time, day),
                )
            )
            await self.db_session.commit()
            return result.rowcount > 0
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.error(f"Error deleting dose for medication {medication_id}: {e}")
            raise

    async def get_by_user_id(self, user_id: int, day: Optional[date] = None) -> List[DoseEventRead]:
        try:
            query = select(DoseEvent).where(DoseEvent.user_id == user_id)
            if day is not None:
                query = query.where(DoseEvent.date == day)
            query = query.order_by(DoseEvent.date, DoseEvent.scheduled_time, DoseEvent.id)
            result = await self.db_session.execute(query)
            return [DoseEventRead.model_validate(e) for e in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"Error fetching dose events for user {user_id}: {e}")
            raise
