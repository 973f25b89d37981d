"""
Comic Studio Backend — Health Check Routes
============================================

What:  GET / (plain-text liveness banner) and GET /health (dependency probe).

Status levels:
    healthy:   database and image host reachable
    degraded:  image host unreachable; reads and saves still work, only
               uploads and cleanup are affected
    unhealthy: database unreachable
"""

import logging
import time

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from sqlalchemy import text

from comicstudio import __version__
from comicstudio.database import engine
from comicstudio.schemas.common import HealthResponse
from comicstudio.services.imagekit_service import imagekit_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def root() -> str:
    return "Comic Studio API is running..."


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Probes the database with SELECT 1 and the image host with a one-item listing.",
)
async def health_check() -> HealthResponse:
    db_status = "connected"
    asset_status = "available"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    if not await imagekit_client.health_check():
        asset_status = "unavailable"
        if overall != "unhealthy":
            overall = "degraded"

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        asset_store=asset_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
