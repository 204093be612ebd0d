from fastapi import APIRouter, Depends, HTTPException, Request, Response, Cookie, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging
import time

from core.config import settings
from core.database import get_db
from core.exceptions import AuthenticationError
from api.deps import get_current_active_user_dependency
from models.user import User
from schemas.auth import LoginRequest, RegisterRequest, UserRead
from schemas.responses import SessionSuccessResponse, SessionCheckResponse, StandardSuccessResponse
from services.authentication_service import (
    authenticate_user,
    create_user_session,
    invalidate_session,
    register_user,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _set_session_cookie(response: Response, session_id: str):
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_id,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
        max_age=settings.SESSION_DURATION * 60,
    )


async def _open_session(request: Request, response: Response, db: AsyncSession, user: User) -> str:
    session_id = await create_user_session(
        db,
        user.id,
        user_agent=request.headers.get("User-Agent", ""),
        ip_address=request.client.host if request.client else "",
    )
    _set_session_cookie(response, session_id)
    return session_id


@router.post("/register", response_model=SessionSuccessResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: Request,
    response: Response,
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db)
):
    start_time = time.time()
    request_id = f"register_{int(start_time * 1000)}"

    try:
        user = await register_user(db, body.email, body.password, body.confirm_password)
        session_id = await _open_session(request, response, db, user)

        logger.info(f"Request {request_id}: Registered user {user.id} in {time.time() - start_time:.2f}s")
        return {
            "success": True,
            "message": "Account created",
            "session_id": session_id,
            "user": UserRead.model_validate(user),
        }
    except ValueError as e:
        logger.warning(f"Request {request_id}: Registration rejected: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/login", response_model=SessionSuccessResponse)
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    start_time = time.time()
    request_id = f"login_{int(start_time * 1000)}"

    try:
        user = await authenticate_user(db, body.email, body.password)
    except AuthenticationError as e:
        logger.info(f"Request {request_id}: Login failed")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))

    session_id = await _open_session(request, response, db, user)
    logger.info(f"Request {request_id}: User {user.id} logged in in {time.time() - start_time:.2f}s")
    return {
        "success": True,
        "message": "Login successful",
        "session_id": session_id,
        "user": UserRead.model_validate(user),
    }


@router.post("/logout", response_model=StandardSuccessResponse)
async def logout(
    response: Response,
    session_id: str = Cookie(None, alias=settings.SESSION_COOKIE_NAME),
    db: AsyncSession = Depends(get_db)
):
    if session_id:
        await invalidate_session(db, session_id)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"success": True, "message": "Logged out"}


@router.get("/session", response_model=SessionCheckResponse)
async def session_check(current_user: User = Depends(get_current_active_user_dependency)):
    return {"success": True, "user": UserRead.model_validate(current_user)}
