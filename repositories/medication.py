import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from models.medication import Medication, MedicationTime
from repositories.base import BaseRepository
from schemas.medication import MedicationCreate, MedicationRead


logger = logging.getLogger(__name__)


class MedicationRepository(BaseRepository[Medication]):
    def __init__(self, db_session: AsyncSession):
        super().__init__(Medication, db_session)
        self.db_session = db_session

    def _build(self, user_id: int, medication_data: MedicationCreate) -> Medication:
        medication_dict = medication_data.model_dump(exclude={"times", "is_ongoing"})
        medication = Medication(user_id=user_id, **medication_dict)
        medication.times_of_day = [
            MedicationTime(time_of_day=t, position=i)
            for i, t in enumerate(medication_data.times)
        ]
        return medication

    async def create(self, user_id: int, medication_data: MedicationCreate) -> MedicationRead:
        """Create a new medication with times"""
        try:
            medication = self._build(user_id, medication_data)
            self.db_session.add(medication)
            await self.db_session.commit()

            logger.info(f"Created medication {medication.name} for user {user_id}")
            return await self.get_by_id(medication.id)

        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.error(f"Error creating medication: {e}")
            raise

    async def create_bulk(
        self,
        user_id: int,
        medications_data: List[MedicationCreate],
        commit: bool = True,
    ) -> List[MedicationRead]:
        """Create multiple medications with times; with commit=False the caller owns the transaction"""
        try:
            created = [self._build(user_id, data) for data in medications_data]
            self.db_session.add_all(created)
            if commit:
                await self.db_session.commit()
            else:
                await self.db_session.flush()

            logger.info(f"Created {len(created)} medications for user {user_id}")
            return [await self.get_by_id(med.id) for med in created]

        except SQLAlchemyError as e:
            if commit:
                await self.db_session.rollback()
            logger.error(f"Error creating medications in bulk: {e}")
            raise

    async def get_by_id(self, medication_id: int) -> Optional[MedicationRead]:
        """Get medication by ID including times"""
        try:
            result = await self.db_session.execute(
                select(Medication)
                .where(Medication.id == medication_id)
                .options(selectinload(Medication.times_of_day))
                .execution_options(populate_existing=True)
            )
            medication = result.scalar_one_or_none()

            if medication:
                return MedicationRead.model_validate(medication)
            return None

        except SQLAlchemyError as e:
            logger.error(f"Error fetching medication {medication_id}: {e}")
            raise

    async def get_by_user_id(self, user_id: int) -> List[MedicationRead]:
        """Get all medications for a user including times, oldest first"""
        try:
            result = await self.db_session.execute(
                select(Medication)
                .where(Medication.user_id == user_id)
                .options(selectinload(Medication.times_of_day))
                .order_by(Medication.id)
            )
            medications = result.scalars().all()

            return [MedicationRead.model_validate(med) for med in medications]

        except SQLAlchemyError as e:
            logger.error(f"Error fetching medications for user {user_id}: {e}")
            raise
