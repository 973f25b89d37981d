"""
Comic Studio Backend — User SQLAlchemy Model
==============================================

What:  ORM model representing the `users` table.
Who:   Used by AuthService for signup/login and by SeriesService to show the
       owner's username next to each series.

Table Design:
    - UUID primary key, generated in Python so it is known right after flush
    - email: unique, stored lower-cased by AuthService
    - password_hash: bcrypt hash from passlib (never the plain password)
    - is_guest: throwaway accounts created by POST /api/auth/guest
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, String, Uuid, false
from sqlalchemy.orm import Mapped, mapped_column

from comicstudio.database import Base


class User(Base):
    """A registered (or guest) comic author."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    username: Mapped[str] = mapped_column(String(100), nullable=False)

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )

    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    is_admin: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    is_guest: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
