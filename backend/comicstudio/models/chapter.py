"""
Comic Studio Backend — Chapter SQLAlchemy Model
=================================================

What:  ORM model representing the `chapters` table.
Who:   Used by ChapterService; `data` is the document that reconciliation diffs.

Column notes:
    - data: the whole chapter document (list of scenes, see
      comicstudio.documents.tree). Replaced wholesale on every update;
      JSONB on PostgreSQL, JSON elsewhere.
    - order: position within the series; listing sorts by it ascending.
    - cover_image / cover_image_id: same URL + asset id pair as Series.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
    false,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from comicstudio.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Chapter(Base):
    """One chapter of a series, holding its panel-layout document."""

    __tablename__ = "chapters"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    series_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("series.id", ondelete="CASCADE"),
        nullable=False,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    # "order" is a reserved word; the column keeps the API name, quoted by SQLAlchemy
    order: Mapped[int] = mapped_column("order", Integer, nullable=False, default=1)

    cover_image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cover_image_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    data: Mapped[List[Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=list,
    )

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

    __table_args__ = (
        Index("idx_chapters_series_order", "series_id", "order"),
    )

    def __repr__(self) -> str:
        return f"<Chapter(id={self.id}, series_id={self.series_id}, order={self.order})>"
