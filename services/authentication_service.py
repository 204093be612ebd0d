import logging
from datetime import datetime, timedelta
from typing import Optional

from pytz import utc
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.exceptions import AuthenticationError
from models.authentication import UserSession
from models.user import User
from repositories.user import UserRepository
from services.helpers import hash_password, verify_password, is_expired

logger = logging.getLogger(__name__)


async def register_user(db: AsyncSession, email: str, password: str, confirm_password: str) -> User:
    if password != confirm_password:
        raise ValueError("Passwords do not match")
    if len(password) < settings.PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters")

    user_repo = UserRepository(db)
    if await user_repo.get_user_by_email(email):
        raise ValueError("An account with this email already exists")

    user = await user_repo.create_user(email.strip().lower(), hash_password(password))
    logger.info(f"Registered user {user.id}")
    return user


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User:
    user_repo = UserRepository(db)
    user = await user_repo.get_user_by_email(email)
    if not user or not verify_password(password, user.password_hash):
        logger.info("Rejected login attempt")
        raise AuthenticationError("Invalid email or password")
    if not user.is_active:
        raise AuthenticationError("Account is disabled")

    await user_repo.touch_last_login(user.id)
    await db.refresh(user)
    return user


async def create_user_session(db: AsyncSession, user_id: int, user_agent: str = "", ip_address: str = "") -> str:
    expires_at = datetime.now(tz=utc) + timedelta(minutes=settings.SESSION_DURATION)
    session = UserSession(
        user_id=user_id,
        expires_at=expires_at,
        user_agent=(user_agent or "")[:255],
        ip_address=ip_address,
    )

    db.add(session)
    await db.commit()
    await db.refresh(session)

    return session.session_id


async def get_user_from_session(db: AsyncSession, session_id: str) -> Optional[User]:
    result = await db.execute(select(UserSession).where(UserSession.session_id == session_id))
    session = result.scalar_one_or_none()

    if not session or not session.is_active:
        return None
    if is_expired(session.expires_at):
        return None

    user = await UserRepository(db).get_user_by_id(session.user_id)
    if not user or not user.is_active:
        return None
    return user


async def invalidate_session(db: AsyncSession, session_id: str):
    await db.execute(
        update(UserSession)
        .where(UserSession.session_id == session_id)
        .values(is_active=False)
    )
    await db.commit()
