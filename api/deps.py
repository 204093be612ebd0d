"""
Dependency injection utilities for API endpoints.
"""

from datetime import date

from fastapi import Depends

from core.clock import today_local
from core.security import get_current_active_user
from models.user import User


async def get_current_active_user_dependency(
    current_user: User = Depends(get_current_active_user)
) -> User:
    """Get current active user dependency."""
    return current_user


def get_today() -> date:
    """Today's date in the configured timezone; overridden in tests."""
    return today_local()
