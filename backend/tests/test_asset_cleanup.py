"""
Comic Studio Backend — Asset Cleanup Dispatcher Tests
=======================================================

What:  AssetCleanupService against an AsyncMock asset store.

What we test:
    ✅ ID references deleted directly
    ✅ Legacy URL references: filename lookup, first match deleted
    ✅ Zero matches → no-op; several matches → only the first
    ✅ Failures never propagate and never stop sibling deletions
"""

import pytest

from comicstudio.documents.tree import ImageRef, RefKind
from comicstudio.exceptions import AssetStoreError
from comicstudio.services.asset_cleanup import AssetCleanupService, filename_from_url


class TestFilenameFromUrl:
    def test_last_path_segment(self):
        assert filename_from_url("http://host/path/img123.png") == "img123.png"

    def test_query_string_excluded(self):
        assert filename_from_url("https://ik.imagekit.io/x/comics/img123.png?tr=w-300") == "img123.png"

    def test_no_file_name(self):
        assert filename_from_url("https://ik.imagekit.io/x/") is None
        assert filename_from_url("") is None


class TestAssetCleanupDispatch:
    def setup_method(self):
        self.id_ref = ImageRef(RefKind.ID, "file_abc")
        self.url_ref = ImageRef(RefKind.URL, "http://host/path/img123.png")

    @pytest.mark.asyncio
    async def test_id_reference_deleted_by_identifier(self, mock_asset_store):
        service = AssetCleanupService(mock_asset_store)
        await service.dispatch([self.id_ref])

        mock_asset_store.delete_file.assert_awaited_once_with("file_abc")
        mock_asset_store.find_by_name.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_legacy_url_looked_up_by_filename(self, mock_asset_store):
        mock_asset_store.find_by_name.return_value = [{"fileId": "file_legacy", "name": "img123.png"}]
        service = AssetCleanupService(mock_asset_store)

        await service.dispatch([self.url_ref])

        mock_asset_store.find_by_name.assert_awaited_once_with("img123.png")
        mock_asset_store.delete_file.assert_awaited_once_with("file_legacy")

    @pytest.mark.asyncio
    async def test_legacy_url_without_match_is_noop(self, mock_asset_store):
        service = AssetCleanupService(mock_asset_store)
        await service.dispatch([self.url_ref])

        mock_asset_store.find_by_name.assert_awaited_once_with("img123.png")
        mock_asset_store.delete_file.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_several_matches_delete_first_only(self, mock_asset_store):
        mock_asset_store.find_by_name.return_value = [
            {"fileId": "first", "name": "img123.png"},
            {"fileId": "second", "name": "img123.png"},
        ]
        service = AssetCleanupService(mock_asset_store)

        await service.dispatch([self.url_ref])

        mock_asset_store.delete_file.assert_awaited_once_with("first")

    @pytest.mark.asyncio
    async def test_failures_are_swallowed(self, mock_asset_store):
        mock_asset_store.delete_file.side_effect = [
            AssetStoreError(message="Image hosting service rejected the request", status_code=404),
            None,
        ]
        service = AssetCleanupService(mock_asset_store)

        await service.dispatch([self.id_ref, ImageRef(RefKind.ID, "file_def")])

        assert mock_asset_store.delete_file.await_count == 2

    @pytest.mark.asyncio
    async def test_lookup_failure_is_swallowed(self, mock_asset_store):
        mock_asset_store.find_by_name.side_effect = RuntimeError("connection reset")
        service = AssetCleanupService(mock_asset_store)

        await service.dispatch([self.url_ref])

        mock_asset_store.delete_file.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_batch(self, mock_asset_store):
        await AssetCleanupService(mock_asset_store).dispatch([])
        mock_asset_store.delete_file.assert_not_awaited()
