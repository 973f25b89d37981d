"""
Comic Studio Backend — Series Service Unit Tests
==================================================

What we test:
    ✅ Create validates title/author and applies the placeholder cover
    ✅ Cover replacement returns the old cover, never the placeholder
    ✅ Partial updates keep untouched fields
    ✅ Ownership and not-found errors
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from comicstudio.config import DEFAULT_SERIES_COVER
from comicstudio.documents.tree import ImageRef, RefKind
from comicstudio.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from comicstudio.schemas.series import SeriesCreate, SeriesUpdate
from comicstudio.services.series_service import SeriesService

from test_chapter_service import make_series


def wire_series(db, series):
    result = MagicMock()
    result.scalar_one_or_none.return_value = series
    db.execute.return_value = result


class TestSeriesServiceCreate:
    def setup_method(self):
        self.service = SeriesService()
        self.owner_id = uuid4()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            SeriesCreate(author="R. Vale"),
            SeriesCreate(title="Night Shift"),
            SeriesCreate(title="", author="R. Vale"),
        ],
    )
    async def test_title_and_author_required(self, mock_db_session, payload):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_series(mock_db_session, self.owner_id, payload)
        assert exc_info.value.message == "Title and Author are required"
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_placeholder_cover_applied(self, mock_db_session):
        owner = make_series(self.owner_id).owner

        async def populate(series, attribute_names=None):
            series.id = uuid4()
            series.owner = owner
            series.status = "ongoing"
            series.published = False
            series.created_at = series.updated_at = datetime.now(timezone.utc)

        mock_db_session.refresh.side_effect = populate

        response = await self.service.create_series(
            mock_db_session,
            self.owner_id,
            SeriesCreate(title="Night Shift", author="R. Vale", tags=["noir"]),
        )

        assert response.cover_image == DEFAULT_SERIES_COVER
        assert response.user.username == "rvale"
        assert response.tags == ["noir"]


class TestSeriesServiceUpdate:
    def setup_method(self):
        self.service = SeriesService()
        self.owner_id = uuid4()
        self.series = make_series(self.owner_id)

    @pytest.mark.asyncio
    async def test_cover_replacement_returns_old_cover(self, mock_db_session):
        self.series.cover_image = "http://x/old.png"
        self.series.cover_image_id = "cover_old"
        wire_series(mock_db_session, self.series)

        response, abandoned = await self.service.update_series(
            mock_db_session,
            self.series.id,
            self.owner_id,
            SeriesUpdate(coverImage="http://x/new.png", coverImageId="cover_new"),
        )

        assert abandoned == ImageRef(RefKind.ID, "cover_old")
        assert response.cover_image_id == "cover_new"

    @pytest.mark.asyncio
    async def test_new_cover_without_id_clears_stale_id(self, mock_db_session):
        self.series.cover_image = "http://x/old.png"
        self.series.cover_image_id = "cover_old"
        wire_series(mock_db_session, self.series)

        _, abandoned = await self.service.update_series(
            mock_db_session,
            self.series.id,
            self.owner_id,
            SeriesUpdate(cover_image="http://x/new.png"),
        )

        assert abandoned == ImageRef(RefKind.ID, "cover_old")
        assert self.series.cover_image_id is None

    @pytest.mark.asyncio
    async def test_placeholder_cover_not_abandoned(self, mock_db_session):
        self.series.cover_image = DEFAULT_SERIES_COVER
        self.series.cover_image_id = None
        wire_series(mock_db_session, self.series)

        _, abandoned = await self.service.update_series(
            mock_db_session,
            self.series.id,
            self.owner_id,
            SeriesUpdate(cover_image="http://x/new.png", cover_image_id="cover_new"),
        )

        assert abandoned is None

    @pytest.mark.asyncio
    async def test_partial_update(self, mock_db_session):
        self.series.description = "Original"
        wire_series(mock_db_session, self.series)

        response, abandoned = await self.service.update_series(
            mock_db_session,
            self.series.id,
            self.owner_id,
            SeriesUpdate(status="hiatus", tags=["horror"]),
        )

        assert abandoned is None
        assert response.title == "Night Shift"
        assert response.description == "Original"
        assert response.status == "hiatus"
        assert response.tags == ["horror"]

    @pytest.mark.asyncio
    async def test_non_owner_rejected(self, mock_db_session):
        wire_series(mock_db_session, self.series)
        with pytest.raises(PermissionDeniedError):
            await self.service.update_series(
                mock_db_session, self.series.id, uuid4(), SeriesUpdate(title="Stolen")
            )

    @pytest.mark.asyncio
    async def test_missing_series(self, mock_db_session):
        wire_series(mock_db_session, None)
        with pytest.raises(NotFoundError) as exc_info:
            await self.service.get_series(mock_db_session, uuid4())
        assert exc_info.value.message == "Series not found"
