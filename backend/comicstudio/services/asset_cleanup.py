"""
Comic Studio Backend — Asset Cleanup Dispatcher
=================================================

What:  Deletes image assets that an edit stopped referencing.
How:   For each ImageRef produced by reconciliation:
           ID  → delete by identifier
           URL → take the last path segment as a file name, look it up in
                 the asset store, delete the first match (no match → no-op)
       All references are processed concurrently; every failure is logged
       and swallowed.
Who:   Scheduled by the series/chapter update routes as a FastAPI background
       task, after the new document has been persisted.

Guarantees (and non-guarantees):
    - Never raises to the caller; the update response never depends on it.
    - No retries and no rollback. A crash or failure leaves orphaned assets.
    - Several legacy name matches → only the first is deleted. This is a
      known imprecision of name-based lookup and is kept as-is.
"""

import asyncio
import logging
from typing import Iterable, Optional
from urllib.parse import urlsplit

from comicstudio.documents.tree import ImageRef, RefKind
from comicstudio.services.asset_store_base import AssetStore
from comicstudio.services.imagekit_service import imagekit_client

logger = logging.getLogger(__name__)


def filename_from_url(url: str) -> Optional[str]:
    """
    Final path segment of `url`, or None when there is none.

    Query string and fragment are not part of the file name:
    "https://ik.imagekit.io/x/comics/img123.png?tr=w-300" → "img123.png"
    """
    path = urlsplit(url).path
    name = path.rsplit("/", 1)[-1]
    return name or None


class AssetCleanupService:
    """
    Best-effort deletion of abandoned image references.

    The asset store is passed in explicitly so tests can substitute a double
    and assert on which identifiers would have been deleted.
    """

    def __init__(self, asset_store: AssetStore):
        self.asset_store = asset_store

    async def dispatch(self, refs: Iterable[ImageRef]) -> None:
        """Delete every reference concurrently; never raises."""
        refs = list(refs)
        if not refs:
            return
        logger.info("[Asset Cleanup] Dispatching %d deletion(s)", len(refs))
        await asyncio.gather(*(self.delete_reference(ref) for ref in refs))

    async def delete_reference(self, ref: ImageRef) -> None:
        """Apply the deletion policy to one reference; failures are logged only."""
        logger.info("[Asset Cleanup] Image no longer referenced: %s", ref.value)
        try:
            if ref.kind is RefKind.ID:
                await self.asset_store.delete_file(ref.value)
            else:
                await self._delete_legacy_url(ref.value)
        except Exception as e:
            # Any failure here is invisible to the user by contract
            logger.warning(
                "[Asset Cleanup] Failed to delete %s %s: %s",
                ref.kind.value,
                ref.value,
                getattr(e, "message", str(e)),
            )

    async def _delete_legacy_url(self, url: str) -> None:
        file_name = filename_from_url(url)
        if not file_name:
            logger.info("[Asset Cleanup] No file name in legacy URL: %s", url)
            return

        matches = await self.asset_store.find_by_name(file_name)
        if not matches:
            logger.info("[Asset Cleanup] Could not find legacy file to delete: %s", file_name)
            return

        file_id = matches[0]["fileId"]
        if len(matches) > 1:
            logger.warning(
                "[Asset Cleanup] %d files named %s; deleting the first (%s)",
                len(matches),
                file_name,
                file_id,
            )
        logger.info("[Asset Cleanup] Found legacy file %s with ID %s. Deleting...", file_name, file_id)
        await self.asset_store.delete_file(file_id)


# ── Singleton Instance ────────────────────────────────────────────────────
asset_cleanup_service = AssetCleanupService(imagekit_client)


def get_asset_cleanup_service() -> AssetCleanupService:
    """FastAPI dependency; overridden in tests via app.dependency_overrides."""
    return asset_cleanup_service


def get_asset_store() -> AssetStore:
    """FastAPI dependency for routes that talk to the asset store directly."""
    return imagekit_client
