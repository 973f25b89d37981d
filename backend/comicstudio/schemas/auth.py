"""
Comic Studio Backend — Auth Schemas
=====================================

Request bodies for signup/login and the user representation returned by
every auth endpoint. The password hash never leaves the service layer.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from comicstudio.schemas.common import CamelModel


class SignupRequest(CamelModel):
    username: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class UserResponse(CamelModel):
    """
    Public view of a user.

    Who:   Returned by signup, login, guest and /me.
    """
    id: uuid.UUID
    username: str
    email: str
    is_admin: bool = False
    is_guest: bool = False
    created_at: Optional[datetime] = None
