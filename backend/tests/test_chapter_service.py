"""
Comic Studio Backend — Chapter Service Unit Tests
===================================================

What:  ChapterService with a mocked database session.

What we test:
    ✅ Save reconciles the stored document against the submitted one
    ✅ Cover replacement adds the old cover to the abandoned list
    ✅ Ownership enforced through the parent series
    ✅ Missing chapter → NotFoundError; flush failure → DatabaseError
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from comicstudio.documents.tree import ImageRef, RefKind
from comicstudio.exceptions import DatabaseError, NotFoundError, PermissionDeniedError
from comicstudio.models.chapter import Chapter
from comicstudio.models.series import Series
from comicstudio.models.user import User
from comicstudio.schemas.chapter import ChapterCreate, ChapterUpdate
from comicstudio.services.chapter_service import ChapterService

from conftest import frame, scene, split


def make_series(owner_id):
    now = datetime.now(timezone.utc)
    series = Series(
        id=uuid4(),
        user_id=owner_id,
        title="Night Shift",
        author="R. Vale",
        tags=[],
        status="ongoing",
        published=False,
        created_at=now,
        updated_at=now,
    )
    series.owner = User(id=owner_id, username="rvale", email="rvale@studio.io", password_hash="x")
    return series


def make_chapter(series, data=None, cover_image=None, cover_image_id=None):
    now = datetime.now(timezone.utc)
    return Chapter(
        id=uuid4(),
        series_id=series.id,
        title="Chapter 1",
        order=1,
        data=data if data is not None else [],
        cover_image=cover_image,
        cover_image_id=cover_image_id,
        published=False,
        created_at=now,
        updated_at=now,
    )


class TestChapterServiceUpdate:
    def setup_method(self):
        self.service = ChapterService()
        self.owner_id = uuid4()
        self.series = make_series(self.owner_id)

    def _wire(self, db, chapter):
        db.get.return_value = chapter
        result = MagicMock()
        result.scalar_one_or_none.return_value = self.series
        db.execute.return_value = result

    @pytest.mark.asyncio
    async def test_save_returns_abandoned_references(self, mock_db_session, sample_documents):
        chapter = make_chapter(self.series, data=sample_documents["old"])
        self._wire(mock_db_session, chapter)

        response, abandoned = await self.service.update_chapter(
            mock_db_session,
            chapter.id,
            self.owner_id,
            ChapterUpdate(data=sample_documents["new"]),
        )

        assert abandoned == [ImageRef(RefKind.URL, "http://x/b.png")]
        assert response.data == sample_documents["new"]
        assert chapter.data == sample_documents["new"]
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_save_without_data_keeps_document(self, mock_db_session, sample_documents):
        chapter = make_chapter(self.series, data=sample_documents["old"])
        self._wire(mock_db_session, chapter)

        response, abandoned = await self.service.update_chapter(
            mock_db_session, chapter.id, self.owner_id, ChapterUpdate(title="Renamed")
        )

        assert abandoned == []
        assert response.title == "Renamed"
        assert chapter.data == sample_documents["old"]

    @pytest.mark.asyncio
    async def test_empty_document_abandons_everything(self, mock_db_session):
        old = [scene(split(frame(image_id="a"), frame(image_id="b")))]
        chapter = make_chapter(self.series, data=old)
        self._wire(mock_db_session, chapter)

        _, abandoned = await self.service.update_chapter(
            mock_db_session, chapter.id, self.owner_id, ChapterUpdate(data=[])
        )

        assert [ref.value for ref in abandoned] == ["a", "b"]
        assert chapter.data == []

    @pytest.mark.asyncio
    async def test_cover_replacement(self, mock_db_session):
        chapter = make_chapter(
            self.series, cover_image="http://x/old-cover.png", cover_image_id="cover_old"
        )
        self._wire(mock_db_session, chapter)

        _, abandoned = await self.service.update_chapter(
            mock_db_session,
            chapter.id,
            self.owner_id,
            ChapterUpdate(cover_image="http://x/new-cover.png", cover_image_id="cover_new"),
        )

        assert abandoned == [ImageRef(RefKind.ID, "cover_old")]
        assert chapter.cover_image_id == "cover_new"

    @pytest.mark.asyncio
    async def test_non_owner_rejected(self, mock_db_session):
        chapter = make_chapter(self.series)
        self._wire(mock_db_session, chapter)

        with pytest.raises(PermissionDeniedError) as exc_info:
            await self.service.update_chapter(
                mock_db_session, chapter.id, uuid4(), ChapterUpdate(data=[])
            )
        assert exc_info.value.message == "Not authorized to edit this chapter"
        mock_db_session.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_chapter(self, mock_db_session):
        mock_db_session.get.return_value = None
        with pytest.raises(NotFoundError):
            await self.service.update_chapter(
                mock_db_session, uuid4(), self.owner_id, ChapterUpdate(data=[])
            )

    @pytest.mark.asyncio
    async def test_flush_failure_wrapped(self, mock_db_session):
        chapter = make_chapter(self.series)
        self._wire(mock_db_session, chapter)
        mock_db_session.flush = AsyncMock(side_effect=RuntimeError("disk full"))

        with pytest.raises(DatabaseError):
            await self.service.update_chapter(
                mock_db_session, chapter.id, self.owner_id, ChapterUpdate(title="x")
            )


class TestChapterServiceCreate:
    def setup_method(self):
        self.service = ChapterService()
        self.owner_id = uuid4()
        self.series = make_series(self.owner_id)

    @pytest.mark.asyncio
    async def test_create_chapter_bumps_series(self, mock_db_session):
        result = MagicMock()
        result.scalar_one_or_none.return_value = self.series
        mock_db_session.execute.return_value = result
        before = self.series.updated_at

        async def assign_id():
            added = mock_db_session.add.call_args[0][0]
            added.id = uuid4()
            added.published = False

        mock_db_session.flush = AsyncMock(side_effect=assign_id)

        response = await self.service.create_chapter(
            mock_db_session, self.series.id, self.owner_id, ChapterCreate(title="Pilot")
        )

        assert response.title == "Pilot"
        assert response.order == 1
        assert response.data == []
        assert self.series.updated_at >= before

    @pytest.mark.asyncio
    async def test_create_chapter_requires_owner(self, mock_db_session):
        result = MagicMock()
        result.scalar_one_or_none.return_value = self.series
        mock_db_session.execute.return_value = result

        with pytest.raises(PermissionDeniedError) as exc_info:
            await self.service.create_chapter(
                mock_db_session, self.series.id, uuid4(), ChapterCreate(title="Pilot")
            )
        assert exc_info.value.message == "Not authorized to add chapters to this series"
