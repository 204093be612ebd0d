from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from core.config import settings


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def now_local() -> datetime:
    return now_utc().astimezone(ZoneInfo(settings.TIMEZONE))


def today_local() -> date:
    """Calendar date that reports treat as "today"."""
    return now_local().date()
