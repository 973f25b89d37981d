"""
Comic Studio Backend — Auth Route Handlers
============================================

What:  Signup, login, guest login, logout and current-user profile.
How:   AuthService validates credentials / creates users; the handlers
       write the resulting identity into the signed session cookie.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from comicstudio.database import get_db_session
from comicstudio.routes.deps import end_session, get_current_user_id, start_session
from comicstudio.schemas.auth import LoginRequest, SignupRequest, UserResponse
from comicstudio.schemas.common import ErrorResponse, MessageResponse
from comicstudio.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/signup",
    status_code=201,
    response_model=UserResponse,
    responses={400: {"description": "User already exists", "model": ErrorResponse}},
    summary="Register a new user and start a session",
)
async def signup(
    payload: SignupRequest,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    user = await auth_service.register(db, payload)
    start_session(request, user)
    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=UserResponse,
    responses={401: {"description": "Invalid email or password", "model": ErrorResponse}},
    summary="Log in and start a session",
)
async def login(
    payload: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    user = await auth_service.authenticate(db, payload)
    start_session(request, user)
    return UserResponse.model_validate(user)


@router.post(
    "/guest",
    status_code=201,
    response_model=UserResponse,
    summary="Create a throwaway guest account and start a session",
)
async def guest_login(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    user = await auth_service.create_guest(db)
    start_session(request, user)
    return UserResponse.model_validate(user)


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Clear the current session",
)
async def logout(
    request: Request,
    user_id: UUID = Depends(get_current_user_id),
) -> MessageResponse:
    end_session(request)
    logger.info("User logged out: %s", user_id)
    return MessageResponse(message="Logged out successfully")


@router.get(
    "/me",
    response_model=UserResponse,
    responses={
        401: {"description": "No session", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="Current user's profile",
)
async def get_me(
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await auth_service.get_profile(db, user_id)
