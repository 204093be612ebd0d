from datetime import datetime, timezone
from typing import Optional
import logging

from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from models.user import User
from repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    def __init__(self, db_session: AsyncSession):
        super().__init__(User, db_session)
        self.db_session = db_session

    async def create_user(self, email: str, password_hash: str) -> User:
        try:
            new_user = User(email=email, password_hash=password_hash, is_active=True)
            self.db_session.add(new_user)
            await self.db_session.commit()
            await self.db_session.refresh(new_user)
            logger.info(f"Created user {new_user.id}")
            return new_user
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.exception(f"Database error in create_user: {str(e)}")
            raise

    async def get_user_by_id(self, user_id: int) -> Optional[User]:
        return await self.get(user_id)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        try:
            query = select(User).where(func.lower(User.email) == email.strip().lower())
            result = await self.db_session.execute(query)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.exception(f"Database error in get_user_by_email: {str(e)}")
            raise

    async def touch_last_login(self, user_id: int) -> None:
        try:
            await self.db_session.execute(
                update(User)
                .where(User.id == user_id)
                .values(last_login=datetime.now(timezone.utc))
            )
            await self.db_session.commit()
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.exception(f"Database error in touch_last_login: {str(e)}")
            raise
