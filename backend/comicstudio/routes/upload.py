"""
Comic Studio Backend — Upload Auth Route
==========================================

What:  GET /api/upload/auth: signed parameters for a direct browser upload
       to ImageKit. Image bytes never pass through this API.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from comicstudio.exceptions import AssetStoreError
from comicstudio.middleware.request_id import request_id_var
from comicstudio.routes.deps import get_current_user_id
from comicstudio.schemas.common import ErrorResponse
from comicstudio.schemas.upload import UploadAuthResponse
from comicstudio.services.asset_cleanup import get_asset_store
from comicstudio.services.asset_store_base import AssetStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/upload", tags=["Upload"])


@router.get(
    "/auth",
    response_model=UploadAuthResponse,
    responses={
        401: {"description": "No session", "model": ErrorResponse},
        500: {"description": "Auth generation failed", "model": ErrorResponse},
    },
    summary="Get ImageKit upload authentication parameters",
)
async def get_upload_auth(
    user_id: UUID = Depends(get_current_user_id),
    asset_store: AssetStore = Depends(get_asset_store),
):
    try:
        params = asset_store.get_authentication_parameters()
    except AssetStoreError as e:
        logger.error("Upload auth generation failed for %s: %s", user_id, e.message)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "Auth generation failed",
                "request_id": request_id_var.get(""),
            },
        )
    return UploadAuthResponse(**params)
