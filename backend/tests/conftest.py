"""
Comic Studio Backend — Test Configuration (conftest.py)
=========================================================

What:  Shared pytest fixtures for the whole suite.

Fixture Hierarchy:
    Function-scoped:
    ├── mock_db_session:   AsyncMock session for service unit tests
    ├── mock_asset_store:  AsyncMock AssetStore (no network)
    ├── sample_documents:  chapter documents used across tests
    ├── recorded_cleanup:  AssetCleanupService double that records what
    │                      would have been deleted
    └── test_client:       httpx AsyncClient on the ASGI app, backed by a
                           fresh SQLite schema per test
"""

import os
import tempfile
from typing import Any, List
from unittest.mock import AsyncMock, MagicMock

# Settings are read at import time; configure the environment first
_TEST_DB_DIR = tempfile.mkdtemp(prefix="comicstudio_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DB_DIR}/test.db"
os.environ["IMAGEKIT_PRIVATE_KEY"] = "private_test_key"
os.environ["IMAGEKIT_PUBLIC_KEY"] = "public_test_key"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from comicstudio.documents.tree import ImageRef  # noqa: E402
from comicstudio.services.asset_store_base import AssetStore  # noqa: E402


def frame(image_id: Any = None, image: Any = None) -> dict:
    node: dict = {"type": "frame"}
    if image_id is not None:
        node["imageId"] = image_id
    if image is not None:
        node["image"] = image
    return node


def split(*children: Any) -> dict:
    return {"type": "split", "direction": "horizontal", "children": list(children)}


def scene(root: Any) -> dict:
    return {"root": root}


class RecordingCleanup:
    """Stands in for AssetCleanupService; remembers every dispatched batch."""

    def __init__(self):
        self.batches: List[List[ImageRef]] = []

    async def dispatch(self, refs):
        self.batches.append(list(refs))

    @property
    def refs(self) -> List[ImageRef]:
        return [ref for batch in self.batches for ref in batch]


@pytest.fixture
def mock_db_session():
    """
    Mock async database session.

    Usage:
        mock_db_session.get.return_value = chapter
        await chapter_service.get_chapter(mock_db_session, chapter.id)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_asset_store():
    store = AsyncMock(spec=AssetStore)
    store.find_by_name.return_value = []
    store.get_authentication_parameters = MagicMock(
        return_value={"token": "tok", "expire": 1700000000, "signature": "sig"}
    )
    return store


@pytest.fixture
def sample_documents():
    """Old/new chapter documents from the reference example."""
    old = [scene(split(frame(image_id="a"), frame(image="http://x/b.png")))]
    new = [scene(frame(image_id="a"))]
    return {"old": old, "new": new}


@pytest.fixture
def recorded_cleanup():
    return RecordingCleanup()


@pytest_asyncio.fixture
async def test_client(recorded_cleanup):
    """
    HTTP client for endpoint tests.

    Each test gets empty tables. Background cleanup is replaced by
    `recorded_cleanup`; ASGITransport runs background tasks before the
    response is returned, so the recording is complete after each call.
    """
    from comicstudio.database import Base, engine
    from comicstudio.main import app
    from comicstudio.services.asset_cleanup import get_asset_cleanup_service
    import comicstudio.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    app.dependency_overrides[get_asset_cleanup_service] = lambda: recorded_cleanup
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()
        # Pooled connections belong to this test's event loop
        await engine.dispose()
