from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from datetime import date
import logging
import time

from api.deps import get_current_active_user_dependency, get_today
from core.database import get_db
from core.exceptions import NotFoundError
from models.user import User
from schemas.dose_event import DoseEventRead, DoseMark
from schemas.responses import StandardSuccessResponse
from services.dose_tracking import DoseTrackingService

logger = logging.getLogger(__name__)

router = APIRouter()


async def _mark(body: DoseMark, user: User, today: date, db: AsyncSession, taken: bool) -> DoseEventRead:
    start_time = time.time()
    action = "taken" if taken else "missed"
    request_id = f"mark_{action}_{int(start_time * 1000)}"
    day = body.date or today

    try:
        service = DoseTrackingService(db)
        if taken:
            event = await service.mark_taken(user.id, body.medication_id, body.scheduled_time, day)
        else:
            event = await service.mark_missed(user.id, body.medication_id, body.scheduled_time, day)

        logger.info(f"Request {request_id}: Recorded dose {event.id} in {time.time() - start_time:.2f}s")
        return event

    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Request {request_id}: Unexpected error recording dose: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to record dose"
        )


@router.post("/taken", response_model=DoseEventRead, summary="Mark a dose as taken")
async def mark_taken(
    body: DoseMark,
    current_user: User = Depends(get_current_active_user_dependency),
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_db)
):
    return await _mark(body, current_user, today, db, taken=True)


@router.post("/missed", response_model=DoseEventRead, summary="Mark a dose as missed")
async def mark_missed(
    body: DoseMark,
    current_user: User = Depends(get_current_active_user_dependency),
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_db)
):
    return await _mark(body, current_user, today, db, taken=False)


@router.delete("", response_model=StandardSuccessResponse, summary="Undo a taken or missed mark")
async def undo_dose(
    medication_id: int = Query(...),
    scheduled_time: str = Query(...),
    day: Optional[date] = Query(None, alias="date"),
    current_user: User = Depends(get_current_active_user_dependency),
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_db)
):
    try:
        await DoseTrackingService(db).undo(current_user.id, medication_id, scheduled_time, day or today)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"success": True, "message": "Dose cleared"}


@router.get("", response_model=List[DoseEventRead], summary="List recorded doses")
async def list_doses(
    day: Optional[date] = Query(None, alias="date"),
    current_user: User = Depends(get_current_active_user_dependency),
    db: AsyncSession = Depends(get_db)
):
    return await DoseTrackingService(db).list_events(current_user.id, day)
