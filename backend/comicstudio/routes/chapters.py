"""
Comic Studio Backend — Chapter Route Handlers
===============================================

What:  GET /api/chapters/{id} and PUT /api/chapters/{id} ("save comic").

Save flow:
    1. ChapterService loads, checks ownership, reconciles and persists
    2. Abandoned image references go to AssetCleanupService as a
       BackgroundTasks job, which runs after the response is sent
    3. The response is the persisted chapter, whatever the deletions do
"""

import logging
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from comicstudio.database import get_db_session
from comicstudio.routes.deps import get_current_user_id
from comicstudio.schemas.chapter import ChapterResponse, ChapterUpdate
from comicstudio.schemas.common import ErrorResponse
from comicstudio.services.asset_cleanup import AssetCleanupService, get_asset_cleanup_service
from comicstudio.services.chapter_service import chapter_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chapters", tags=["Chapters"])


@router.get(
    "/{chapter_id}",
    response_model=ChapterResponse,
    responses={404: {"description": "Chapter not found", "model": ErrorResponse}},
    summary="Get a chapter with its document",
)
async def get_chapter(
    chapter_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> ChapterResponse:
    return await chapter_service.get_chapter(db, chapter_id)


@router.put(
    "/{chapter_id}",
    response_model=ChapterResponse,
    responses={
        401: {"description": "No session", "model": ErrorResponse},
        403: {"description": "Not the owner of the series", "model": ErrorResponse},
        404: {"description": "Chapter not found", "model": ErrorResponse},
    },
    summary="Save a chapter (owner only)",
    description=(
        "Replaces the chapter document when `data` is supplied. Images the new "
        "document no longer references are deleted from the image host in the "
        "background; deletion failures never affect this response."
    ),
)
async def update_chapter(
    chapter_id: UUID,
    payload: ChapterUpdate,
    background_tasks: BackgroundTasks,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
    cleanup: AssetCleanupService = Depends(get_asset_cleanup_service),
) -> ChapterResponse:
    result, abandoned = await chapter_service.update_chapter(db, chapter_id, user_id, payload)
    if abandoned:
        background_tasks.add_task(cleanup.dispatch, abandoned)
    return result
