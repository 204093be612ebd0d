from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from typing import List
import logging
from datetime import date

from core.exceptions import NotFoundError
from repositories.medication import MedicationRepository
from schemas.medication import MedicationCreate, MedicationRead

logger = logging.getLogger(__name__)


class MedicationService:
    """Service for medication business logic."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.medication_repo = MedicationRepository(db)

    async def add_medication(
        self,
        user_id: int,
        medication_data: MedicationCreate,
        today: date,
    ) -> MedicationRead:
        """
        Add a medication to the user's list.

        Args:
            user_id: ID of the owning user
            medication_data: Validated form payload
            today: Local date, used when no start date was given

        Returns:
            The stored medication including its reminder times

        Raises:
            ValueError: If the dates are inconsistent
        """
        try:
            if medication_data.start_date is None:
                medication_data.start_date = today
            if medication_data.end_date and medication_data.end_date < medication_data.start_date:
                raise ValueError("End date cannot be before start date")

            medication = await self.medication_repo.create(user_id, medication_data)
            logger.info(
                f"Added medication {medication.id} for user {user_id} "
                f"with {len(medication.times)} reminder times"
            )
            return medication

        except ValueError as e:
            logger.warning(f"Validation error adding medication for user {user_id}: {e}")
            raise
        except SQLAlchemyError as e:
            logger.error(f"Database error adding medication for user {user_id}: {e}")
            raise

    async def get_user_medications(self, user_id: int) -> List[MedicationRead]:
        """All medications of a user, in the order they were added."""
        return await self.medication_repo.get_by_user_id(user_id)

    async def get_user_medication(self, user_id: int, medication_id: int) -> MedicationRead:
        """
        Fetch one medication, hiding medications owned by other users.

        Raises:
            NotFoundError: If the medication does not exist or is not the user's
        """
        medication = await self.medication_repo.get_by_id(medication_id)
        if medication is None or medication.user_id != user_id:
            raise NotFoundError(f"Medication {medication_id} not found")
        return medication
