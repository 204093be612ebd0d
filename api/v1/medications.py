from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from datetime import date
import logging
import time

from api.deps import get_current_active_user_dependency, get_today
from core.database import get_db
from core.exceptions import NotFoundError
from models.user import User
from schemas.medication import MedicationCreate, MedicationRead
from services.medication import MedicationService

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=MedicationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add a medication"
)
async def add_medication(
    medication: MedicationCreate,
    current_user: User = Depends(get_current_active_user_dependency),
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_db)
):
    """
    Add a medication with its daily reminder times.
    """
    start_time = time.time()
    request_id = f"add_medication_{int(start_time * 1000)}"

    logger.info(
        f"Request {request_id}: Adding medication for user {current_user.id} "
        f"with {len(medication.times)} reminder times"
    )

    try:
        medication_service = MedicationService(db)
        result = await medication_service.add_medication(current_user.id, medication, today)

        duration = time.time() - start_time
        logger.info(f"Request {request_id}: Created medication {result.id} in {duration:.2f}s")
        return result

    except ValueError as e:
        duration = time.time() - start_time
        logger.warning(f"Request {request_id}: Validation error after {duration:.2f}s: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    except HTTPException:
        raise

    except Exception as e:
        duration = time.time() - start_time
        logger.error(f"Request {request_id}: Unexpected error after {duration:.2f}s: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while adding the medication"
        )


@router.get(
    "",
    response_model=List[MedicationRead],
    summary="List medications"
)
async def list_medications(
    current_user: User = Depends(get_current_active_user_dependency),
    db: AsyncSession = Depends(get_db)
):
    start_time = time.time()
    request_id = f"list_medications_{int(start_time * 1000)}"

    try:
        medications = await MedicationService(db).get_user_medications(current_user.id)
        logger.info(
            f"Request {request_id}: Retrieved {len(medications)} medications for user {current_user.id} "
            f"in {time.time() - start_time:.2f}s"
        )
        return medications

    except Exception as e:
        logger.error(f"Request {request_id}: Error listing medications: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve medications"
        )


@router.get(
    "/{medication_id}",
    response_model=MedicationRead,
    summary="Get a medication"
)
async def get_medication(
    medication_id: int,
    current_user: User = Depends(get_current_active_user_dependency),
    db: AsyncSession = Depends(get_db)
):
    try:
        return await MedicationService(db).get_user_medication(current_user.id, medication_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
