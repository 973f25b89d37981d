"""
Comic Studio Backend — Series Service
=======================================

What:  Series listing, creation, retrieval and owner-only updates.
Who:   Called by the /api/series route handlers.

Cover replacement:
    When an update carries a new cover, the previous cover is reconciled
    against it with the same ID-over-URL policy used for chapter frames.
    The abandoned reference (if any) is returned to the route, which hands
    it to AssetCleanupService as a background task. The service itself
    never talks to the asset store.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from comicstudio.config import DEFAULT_SERIES_COVER
from comicstudio.documents.reconcile import reconcile_cover
from comicstudio.documents.tree import ImageRef
from comicstudio.exceptions import (
    ComicStudioError,
    DatabaseError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from comicstudio.models.series import Series
from comicstudio.schemas.series import (
    SeriesCreate,
    SeriesOwner,
    SeriesResponse,
    SeriesUpdate,
)

logger = logging.getLogger(__name__)


def to_series_response(series: Series) -> SeriesResponse:
    """Build the API view; `series.owner` must already be loaded."""
    return SeriesResponse(
        id=series.id,
        user=SeriesOwner(id=series.owner.id, username=series.owner.username),
        title=series.title,
        author=series.author,
        description=series.description,
        cover_image=series.cover_image,
        cover_image_id=series.cover_image_id,
        tags=list(series.tags or []),
        status=series.status,
        published=series.published,
        created_at=series.created_at,
        updated_at=series.updated_at,
    )


class SeriesService:
    """
    Business logic for series.

    Error Handling Strategy:
        Missing rows → NotFoundError, foreign owner → PermissionDeniedError,
        unexpected database failures → DatabaseError.
    """

    async def load_series(self, db: AsyncSession, series_id: UUID) -> Series:
        """
        Fetch a series (with owner) or raise NotFoundError.

        Also used by ChapterService for the chapter ownership check.
        """
        try:
            result = await db.execute(select(Series).where(Series.id == series_id))
            series = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching series %s: %s", series_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the series. Please try again.",
                context={"series_id": str(series_id)},
            )
        if series is None:
            raise NotFoundError(resource="series")
        return series

    @staticmethod
    def ensure_owner(series: Series, requester_id: UUID, message: str = "Not authorized") -> None:
        if series.user_id != requester_id:
            raise PermissionDeniedError(
                message=message,
                context={"series_id": str(series.id), "requester_id": str(requester_id)},
            )

    async def list_series(
        self,
        db: AsyncSession,
        filter: Optional[str] = None,
    ) -> List[SeriesResponse]:
        """
        All series with their owner's username.

        filter="trending" → newest first (created_at DESC); anything else →
        most recently updated first.
        """
        order = desc(Series.created_at) if filter == "trending" else desc(Series.updated_at)
        try:
            result = await db.execute(select(Series).order_by(order))
            rows = list(result.scalars().all())
        except Exception as e:
            logger.error("Database error listing series: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve series. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return [to_series_response(series) for series in rows]

    async def get_series(self, db: AsyncSession, series_id: UUID) -> SeriesResponse:
        return to_series_response(await self.load_series(db, series_id))

    async def create_series(
        self,
        db: AsyncSession,
        requester_id: UUID,
        payload: SeriesCreate,
    ) -> SeriesResponse:
        """
        Raises:
            ValidationError: title or author missing/blank
        """
        if not payload.title or not payload.author:
            raise ValidationError(message="Title and Author are required")

        series = Series(
            user_id=requester_id,
            title=payload.title,
            author=payload.author,
            description=payload.description,
            tags=list(payload.tags),
            cover_image=payload.cover_image or DEFAULT_SERIES_COVER,
            cover_image_id=payload.cover_image_id,
        )
        try:
            db.add(series)
            await db.flush()
            # The owner relationship is not populated by an INSERT
            await db.refresh(series, attribute_names=["owner"])
        except Exception as e:
            logger.error("Database error creating series: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the series. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Series created: %s by %s", series.id, requester_id)
        return to_series_response(series)

    async def update_series(
        self,
        db: AsyncSession,
        series_id: UUID,
        requester_id: UUID,
        payload: SeriesUpdate,
    ) -> Tuple[SeriesResponse, Optional[ImageRef]]:
        """
        Partial update by the owner.

        Returns:
            (updated series, abandoned cover reference or None)

        Raises:
            NotFoundError, PermissionDeniedError, DatabaseError
        """
        series = await self.load_series(db, series_id)
        self.ensure_owner(series, requester_id)

        abandoned: Optional[ImageRef] = None
        try:
            if payload.title:
                series.title = payload.title
            if payload.description:
                series.description = payload.description

            if payload.cover_image:
                abandoned = reconcile_cover(
                    series.cover_image_id,
                    series.cover_image,
                    payload.cover_image_id,
                    payload.cover_image,
                    ignore_urls=(DEFAULT_SERIES_COVER,),
                )
                if abandoned is not None:
                    logger.info(
                        "[Series Update] Replacing cover of %s; old %s %s scheduled for deletion",
                        series.id,
                        abandoned.kind.value,
                        abandoned.value,
                    )
                series.cover_image = payload.cover_image
                series.cover_image_id = payload.cover_image_id

            if payload.status:
                series.status = payload.status
            if payload.tags is not None:
                series.tags = list(payload.tags)

            series.updated_at = datetime.now(timezone.utc)
            await db.flush()
        except ComicStudioError:
            raise
        except Exception as e:
            logger.error("Database error updating series %s: %s", series_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the series. Please try again.",
                context={"series_id": str(series_id)},
            )

        return to_series_response(series), abandoned


# ── Singleton Instance ────────────────────────────────────────────────────
series_service = SeriesService()
