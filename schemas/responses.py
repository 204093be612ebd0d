from pydantic import BaseModel
from typing import Optional, Any

from schemas.auth import UserRead


class StandardSuccessResponse(BaseModel):
    success: bool = True
    message: str
    data: Optional[Any] = None


class SessionSuccessResponse(BaseModel):
    success: bool = True
    message: str
    session_id: Optional[str] = None
    user: Optional[UserRead] = None


class SessionCheckResponse(BaseModel):
    success: bool = True
    user: UserRead

