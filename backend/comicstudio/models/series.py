"""
Comic Studio Backend — Series SQLAlchemy Model
================================================

What:  ORM model representing the `series` table (a comic title).
Who:   Used by SeriesService for CRUD and by ChapterService for ownership checks.

Table Design Rationale:
    - user_id: the owner; the only authorization rule is owner equality
    - cover_image / cover_image_id: the cover URL plus its stable asset id.
      Covers uploaded before ids were recorded only have the URL.
    - tags: JSON list of strings (portable between PostgreSQL and SQLite)
    - updated_at: drives the default listing order; bumped when a chapter
      is added

Index on updated_at DESC: optimizes GET /api/series (most recently updated first).
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    Uuid,
    false,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from comicstudio.config import DEFAULT_SERIES_COVER
from comicstudio.database import Base
from comicstudio.models.user import User

SERIES_STATUSES = ("ongoing", "completed", "hiatus")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Series(Base):
    """
    A comic title owned by one user, containing ordered chapters.

    The owner is eagerly joined on every SELECT so responses can include
    the owner's username without an extra round-trip.
    """

    __tablename__ = "series"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    cover_image: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        default=DEFAULT_SERIES_COVER,
    )
    cover_image_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    # Values: ongoing | completed | hiatus (validated by the API schema)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="ongoing")

    published: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    owner: Mapped[User] = relationship(User, lazy="joined", innerjoin=True)

    __table_args__ = (
        Index("idx_series_updated_at", updated_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Series(id={self.id}, title='{self.title}', user_id={self.user_id})>"
