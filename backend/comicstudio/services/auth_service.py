"""
Comic Studio Backend — Auth Service
=====================================

What:  Registration, credential checks, guest accounts and profile lookup.
How:   Passwords are hashed with passlib's bcrypt scheme. Session handling
       (the signed cookie) stays in the route layer; this service only
       returns the authenticated User.
Who:   Called by the /api/auth route handlers.
"""

import logging
import random
import secrets
import time
from typing import Optional
from uuid import UUID

from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from comicstudio.exceptions import (
    AuthenticationError,
    ComicStudioError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from comicstudio.models.user import User
from comicstudio.schemas.auth import LoginRequest, SignupRequest, UserResponse

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


class AuthService:
    """
    Business logic for user accounts.

    Error Handling Strategy:
        Business failures raise ValidationError / AuthenticationError /
        NotFoundError. Anything unexpected from the database is wrapped in
        DatabaseError so no driver details reach the client.
    """

    async def _find_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def register(self, db: AsyncSession, payload: SignupRequest) -> User:
        """
        Create a new account.

        Raises:
            ValidationError: email already registered (→ 400 "User already exists")
        """
        try:
            if await self._find_by_email(db, payload.email) is not None:
                raise ValidationError(message="User already exists", field="email")

            user = User(
                username=payload.username,
                email=payload.email.lower(),
                password_hash=hash_password(payload.password),
            )
            db.add(user)
            await db.flush()
            logger.info("User registered: %s", user.id)
            return user

        except ComicStudioError:
            raise
        except Exception as e:
            logger.error("Database error registering user: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the account. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def authenticate(self, db: AsyncSession, payload: LoginRequest) -> User:
        """
        Check email + password.

        Raises:
            AuthenticationError: unknown email or wrong password (same message
            for both, so the response does not reveal which emails exist)
        """
        try:
            user = await self._find_by_email(db, payload.email)
        except Exception as e:
            logger.error("Database error during login: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        if user is None or not verify_password(payload.password, user.password_hash):
            logger.info("Failed login attempt for %s", payload.email)
            raise AuthenticationError(message="Invalid email or password")
        return user

    async def create_guest(self, db: AsyncSession) -> User:
        """
        Create a throwaway account so visitors can try the editor.

        Username "Guest Agent NNNNN", a unique temp email and a random password
        nobody knows; the session cookie is the only way back in.
        """
        guest_number = random.randint(10000, 99999)
        user = User(
            username=f"Guest Agent {guest_number}",
            email=f"guest_{guest_number}_{int(time.time() * 1000)}@temp.com",
            password_hash=hash_password(secrets.token_urlsafe(12)),
            is_guest=True,
        )
        try:
            db.add(user)
            await db.flush()
        except Exception as e:
            logger.error("Database error creating guest: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Server error during guest login",
                context={"error_type": type(e).__name__},
            )
        logger.info("Guest user created: %s", user.id)
        return user

    async def get_profile(self, db: AsyncSession, user_id: UUID) -> UserResponse:
        """
        Raises:
            NotFoundError: the session points at a user that no longer exists
        """
        try:
            user = await db.get(User, user_id)
        except Exception as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise DatabaseError(context={"user_id": str(user_id)})

        if user is None:
            raise NotFoundError(resource="user")
        return UserResponse.model_validate(user)


# ── Singleton Instance ────────────────────────────────────────────────────
auth_service = AuthService()
