from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from datetime import date
import logging

from api.deps import get_current_active_user_dependency, get_today
from core.database import get_db
from models.user import User
from schemas.report import AdherencePoint, AdherenceReport, StreakResponse, TodaySchedule
from services.report_service import ReportService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/today", response_model=TodaySchedule, summary="Today's schedule with status")
async def today_schedule(
    current_user: User = Depends(get_current_active_user_dependency),
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_db)
):
    return await ReportService(db).today_schedule(current_user.id, today)


@router.get("/adherence", response_model=List[AdherencePoint], summary="7-day adherence series")
async def adherence_series(
    current_user: User = Depends(get_current_active_user_dependency),
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_db)
):
    return await ReportService(db).adherence_series(current_user.id, today)


@router.get("/streak", response_model=StreakResponse, summary="Current streak in days")
async def streak(
    current_user: User = Depends(get_current_active_user_dependency),
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_db)
):
    return {"streak": await ReportService(db).streak(current_user.id, today)}


@router.get("/summary", response_model=AdherenceReport, summary="Full adherence report")
async def summary(
    current_user: User = Depends(get_current_active_user_dependency),
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_db)
):
    return await ReportService(db).summary(current_user.id, today)
