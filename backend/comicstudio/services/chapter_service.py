"""
Comic Studio Backend — Chapter Service (Document Orchestrator)
================================================================

What:  Chapter listing/creation/retrieval and the "save comic" update that
       reconciles image references between the stored and submitted documents.
How:   Composes SeriesService (ownership), the documents package
       (reconciliation) and the database session.
Who:   Called by the /api/series/{id}/chapters and /api/chapters route handlers.

Update Flow (PUT /api/chapters/{id}):
    ┌──────────┐   ┌────────────┐   ┌──────────────┐   ┌──────────┐   ┌──────────────┐
    │  Load    │──▶│  Owner     │──▶│  Reconcile   │──▶│  Persist │──▶│  Route adds  │
    │  chapter │   │  check via │   │  old vs new  │   │  (flush) │   │  background  │
    │          │   │  series    │   │  doc + cover │   │          │   │  cleanup     │
    └──────────┘   └────────────┘   └──────────────┘   └──────────┘   └──────────────┘

    Reconciliation is pure and runs before persistence; the abandoned
    references are returned, not deleted here. Deletion outcomes therefore
    cannot affect the update's success.

Concurrency:
    No locking or version check. Two simultaneous saves of one chapter race
    and the later write wins; each diffs against whatever it loaded.
"""

import logging
from datetime import datetime, timezone
from typing import List, Tuple
from uuid import UUID

from sqlalchemy import asc, select
from sqlalchemy.ext.asyncio import AsyncSession

from comicstudio.documents.reconcile import reconcile, reconcile_cover
from comicstudio.documents.tree import ImageRef
from comicstudio.exceptions import ComicStudioError, DatabaseError, NotFoundError
from comicstudio.models.chapter import Chapter
from comicstudio.schemas.chapter import ChapterCreate, ChapterResponse, ChapterUpdate
from comicstudio.services.series_service import series_service

logger = logging.getLogger(__name__)


class ChapterService:
    """
    Business logic for chapters.

    Stateless: every call receives its database session.
    """

    async def _load_chapter(self, db: AsyncSession, chapter_id: UUID) -> Chapter:
        try:
            chapter = await db.get(Chapter, chapter_id)
        except Exception as e:
            logger.error("Database error fetching chapter %s: %s", chapter_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the chapter. Please try again.",
                context={"chapter_id": str(chapter_id)},
            )
        if chapter is None:
            raise NotFoundError(resource="chapter")
        return chapter

    async def list_chapters(self, db: AsyncSession, series_id: UUID) -> List[ChapterResponse]:
        """Chapters of a series ordered by `order` ascending (empty for unknown series)."""
        try:
            result = await db.execute(
                select(Chapter)
                .where(Chapter.series_id == series_id)
                .order_by(asc(Chapter.order), asc(Chapter.created_at))
            )
            chapters = list(result.scalars().all())
        except Exception as e:
            logger.error("Database error listing chapters: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve chapters. Please try again.",
                context={"series_id": str(series_id)},
            )
        return [ChapterResponse.model_validate(chapter) for chapter in chapters]

    async def get_chapter(self, db: AsyncSession, chapter_id: UUID) -> ChapterResponse:
        return ChapterResponse.model_validate(await self._load_chapter(db, chapter_id))

    async def create_chapter(
        self,
        db: AsyncSession,
        series_id: UUID,
        requester_id: UUID,
        payload: ChapterCreate,
    ) -> ChapterResponse:
        """
        Add an empty chapter to a series the requester owns.

        Also bumps the series' updated_at so it rises in the default listing.
        """
        series = await series_service.load_series(db, series_id)
        series_service.ensure_owner(
            series, requester_id, message="Not authorized to add chapters to this series"
        )

        now = datetime.now(timezone.utc)
        chapter = Chapter(
            series_id=series.id,
            title=payload.title,
            order=payload.order or 1,
            data=[],
            created_at=now,
            updated_at=now,
        )
        try:
            db.add(chapter)
            series.updated_at = now
            await db.flush()
        except Exception as e:
            logger.error("Database error creating chapter: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the chapter. Please try again.",
                context={"series_id": str(series_id)},
            )

        logger.info("Chapter created: %s in series %s", chapter.id, series.id)
        return ChapterResponse.model_validate(chapter)

    async def update_chapter(
        self,
        db: AsyncSession,
        chapter_id: UUID,
        requester_id: UUID,
        payload: ChapterUpdate,
    ) -> Tuple[ChapterResponse, List[ImageRef]]:
        """
        Save a chapter: replace its document and/or title and/or cover.

        Rules:
            - data present (even []) → replaces the whole document; references
              dropped by the new document are returned for deletion
            - title non-empty → replaces the title
            - coverImage non-empty → replaces the cover; the old cover is
              returned for deletion when it differs

        Returns:
            (persisted chapter, abandoned references in document order,
             followed by the old cover if it was replaced)

        Raises:
            NotFoundError: chapter (or its series) does not exist
            PermissionDeniedError: requester does not own the series
            DatabaseError: persistence failed
        """
        chapter = await self._load_chapter(db, chapter_id)
        series = await series_service.load_series(db, chapter.series_id)
        series_service.ensure_owner(
            series, requester_id, message="Not authorized to edit this chapter"
        )

        abandoned: List[ImageRef] = []
        try:
            if payload.data is not None:
                removed = reconcile(chapter.data or [], payload.data)
                for ref in removed:
                    logger.info("[Frame Cleanup] Image removed from comic: %s", ref.value)
                abandoned.extend(removed)
                chapter.data = payload.data

            if payload.title:
                chapter.title = payload.title

            if payload.cover_image:
                old_cover = reconcile_cover(
                    chapter.cover_image_id,
                    chapter.cover_image,
                    payload.cover_image_id,
                    payload.cover_image,
                )
                if old_cover is not None:
                    logger.info(
                        "[Chapter Update] Replacing cover of %s; old %s %s scheduled for deletion",
                        chapter.id,
                        old_cover.kind.value,
                        old_cover.value,
                    )
                    abandoned.append(old_cover)
                chapter.cover_image = payload.cover_image
                chapter.cover_image_id = payload.cover_image_id

            chapter.updated_at = datetime.now(timezone.utc)
            await db.flush()
        except ComicStudioError:
            raise
        except Exception as e:
            logger.error("Database error saving chapter %s: %s", chapter_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the chapter. Please try again.",
                context={"chapter_id": str(chapter_id)},
            )

        logger.info(
            "Chapter %s saved (%d abandoned image reference(s))", chapter.id, len(abandoned)
        )
        return ChapterResponse.model_validate(chapter), abandoned


# ── Singleton Instance ────────────────────────────────────────────────────
chapter_service = ChapterService()
