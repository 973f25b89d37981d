"""
Comic Studio Backend — Series Route Handlers
==============================================

What:  Series CRUD plus the nested chapter collection routes.

Route Inventory:
    GET  /api/series                  public   list (filter=trending → newest first)
    POST /api/series                  session  create
    GET  /api/series/{id}             public   detail
    PUT  /api/series/{id}             owner    partial update, cover replacement
    GET  /api/series/{id}/chapters    public   chapters by order
    POST /api/series/{id}/chapters    owner    add an empty chapter
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from comicstudio.database import get_db_session
from comicstudio.routes.deps import get_current_user_id
from comicstudio.schemas.chapter import ChapterCreate, ChapterResponse
from comicstudio.schemas.common import ErrorResponse
from comicstudio.schemas.series import SeriesCreate, SeriesResponse, SeriesUpdate
from comicstudio.services.asset_cleanup import AssetCleanupService, get_asset_cleanup_service
from comicstudio.services.chapter_service import chapter_service
from comicstudio.services.series_service import series_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/series", tags=["Series"])


@router.get("", response_model=List[SeriesResponse], summary="List all series")
async def list_series(
    filter: Optional[str] = Query(
        default=None,
        description="'trending' sorts by creation date; default sorts by last update",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> List[SeriesResponse]:
    return await series_service.list_series(db, filter=filter)


@router.post(
    "",
    status_code=201,
    response_model=SeriesResponse,
    responses={
        400: {"description": "Title and Author are required", "model": ErrorResponse},
        401: {"description": "No session", "model": ErrorResponse},
    },
    summary="Create a series owned by the current user",
)
async def create_series(
    payload: SeriesCreate,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> SeriesResponse:
    return await series_service.create_series(db, user_id, payload)


@router.get(
    "/{series_id}",
    response_model=SeriesResponse,
    responses={404: {"description": "Series not found", "model": ErrorResponse}},
    summary="Get a series by ID",
)
async def get_series(
    series_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> SeriesResponse:
    return await series_service.get_series(db, series_id)


@router.put(
    "/{series_id}",
    response_model=SeriesResponse,
    responses={
        403: {"description": "Not the owner", "model": ErrorResponse},
        404: {"description": "Series not found", "model": ErrorResponse},
    },
    summary="Update a series (owner only)",
    description=(
        "Partial update. Supplying a new coverImage schedules deletion of the "
        "previous cover from the image host after the response is sent."
    ),
)
async def update_series(
    series_id: UUID,
    payload: SeriesUpdate,
    background_tasks: BackgroundTasks,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
    cleanup: AssetCleanupService = Depends(get_asset_cleanup_service),
) -> SeriesResponse:
    result, old_cover = await series_service.update_series(db, series_id, user_id, payload)
    if old_cover is not None:
        background_tasks.add_task(cleanup.dispatch, [old_cover])
    return result


@router.get(
    "/{series_id}/chapters",
    response_model=List[ChapterResponse],
    summary="List the chapters of a series in reading order",
)
async def list_chapters(
    series_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> List[ChapterResponse]:
    return await chapter_service.list_chapters(db, series_id)


@router.post(
    "/{series_id}/chapters",
    status_code=201,
    response_model=ChapterResponse,
    responses={
        403: {"description": "Not the owner", "model": ErrorResponse},
        404: {"description": "Series not found", "model": ErrorResponse},
    },
    summary="Add a chapter to a series (owner only)",
)
async def create_chapter(
    series_id: UUID,
    payload: ChapterCreate,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ChapterResponse:
    return await chapter_service.create_chapter(db, series_id, user_id, payload)
