from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging
import time

from api.deps import get_current_active_user_dependency
from core.database import get_db
from models.user import User
from schemas.data_exchange import ImportResult, UserDataBlob
from services.data_exchange import DataExchangeService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/export", response_model=UserDataBlob, summary="Export in the local-storage format")
async def export_data(
    current_user: User = Depends(get_current_active_user_dependency),
    db: AsyncSession = Depends(get_db)
):
    return await DataExchangeService(db).export_user_data(current_user.id)


@router.post("/import", response_model=ImportResult, summary="Import a local-storage blob")
async def import_data(
    blob: UserDataBlob,
    current_user: User = Depends(get_current_active_user_dependency),
    db: AsyncSession = Depends(get_db)
):
    start_time = time.time()
    request_id = f"import_{int(start_time * 1000)}"

    logger.info(
        f"Request {request_id}: Importing {len(blob.medications)} medications and "
        f"{len(blob.dose_history)} doses for user {current_user.id}"
    )
    try:
        result = await DataExchangeService(db).import_user_data(current_user.id, blob)
        logger.info(f"Request {request_id}: Import finished in {time.time() - start_time:.2f}s")
        return result
    except Exception as e:
        logger.error(f"Request {request_id}: Import failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to import data"
        )
