"""
Comic Studio Backend — ImageKit Asset Store Client
====================================================

What:  Concrete AssetStore talking to the ImageKit REST API.
How:   A lazily created httpx.AsyncClient with HTTP Basic auth (private key as
       username, empty password). Upload signatures are computed locally with
       HMAC-SHA1, exactly as the official SDKs do.
Who:   Singleton `imagekit_client`, injected into AssetCleanupService and the
       upload-auth route. Tests construct their own instance on an
       httpx.MockTransport.

Endpoints used:
    DELETE /v1/files/{fileId}                     → 204 No Content
    GET    /v1/files?searchQuery=name="a.png"     → [{"fileId": ..., "name": ...}]

Failure policy:
    Every non-2xx response or transport error becomes AssetStoreError.
    No retries: cleanup is best-effort by contract, and a failed
    upload-auth request is cheap for the client to repeat.
"""

import hashlib
import hmac
import logging
import time
import uuid
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from comicstudio.config import settings
from comicstudio.exceptions import AssetStoreError
from comicstudio.services.asset_store_base import AssetStore

logger = logging.getLogger(__name__)


class ImageKitClient(AssetStore):
    """
    ImageKit implementation of the asset store contract.

    The httpx client is created on first use and reused for every call
    (connection pooling). `aclose()` is called from the app lifespan.
    """

    def __init__(
        self,
        private_key: Optional[str] = None,
        public_key: Optional[str] = None,
        api_base: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.private_key = settings.imagekit_private_key if private_key is None else private_key
        self.public_key = settings.imagekit_public_key if public_key is None else public_key
        self.api_base = (api_base or settings.imagekit_api_base).rstrip("/")
        self.timeout = timeout or settings.asset_request_timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    # ── HTTP plumbing ─────────────────────────────────────────────────────

    def _get_client(self) -> httpx.AsyncClient:
        if not self.private_key:
            raise AssetStoreError(message="Image hosting service is not configured")
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.api_base,
                auth=(self.private_key, ""),
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send one request; translate every failure into AssetStoreError."""
        client = self._get_client()
        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("ImageKit %s %s failed: %s", method, path, str(e))
            raise AssetStoreError(
                message="Could not reach the image hosting service",
                context={"method": method, "path": path, "error_type": type(e).__name__},
            ) from e

        if response.is_error:
            logger.warning(
                "ImageKit %s %s returned %d: %s",
                method,
                path,
                response.status_code,
                response.text[:200],
            )
            raise AssetStoreError(
                message="Image hosting service rejected the request",
                status_code=response.status_code,
                context={"method": method, "path": path},
            )
        return response

    async def aclose(self) -> None:
        """Close the pooled HTTP connections (application shutdown)."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    # ── AssetStore contract ───────────────────────────────────────────────

    async def delete_file(self, file_id: str) -> None:
        await self._request("DELETE", f"/files/{quote(file_id, safe='')}")
        logger.info("ImageKit file deleted: %s", file_id)

    async def find_by_name(self, name: str) -> List[Dict[str, Any]]:
        # Double quotes inside the name would break the search expression
        escaped = name.replace('"', '\\"')
        response = await self._request(
            "GET",
            "/files",
            params={"searchQuery": f'name="{escaped}"'},
        )
        try:
            payload = response.json()
        except ValueError as e:
            raise AssetStoreError(
                message="Image hosting service returned an unreadable response",
                context={"path": "/files"},
            ) from e

        if not isinstance(payload, list):
            return []
        return [item for item in payload if isinstance(item, dict) and item.get("fileId")]

    def get_authentication_parameters(
        self,
        token: Optional[str] = None,
        expire: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Signed parameters for a browser upload straight to ImageKit.

        signature = HMAC-SHA1(private_key, token + str(expire)), hex encoded.
        `token` and `expire` can be pinned for deterministic tests.
        """
        if not self.private_key:
            raise AssetStoreError(message="Image hosting service is not configured")

        token = token or str(uuid.uuid4())
        expire = expire or int(time.time()) + settings.upload_token_ttl
        signature = hmac.new(
            self.private_key.encode("utf-8"),
            f"{token}{expire}".encode("utf-8"),
            hashlib.sha1,
        ).hexdigest()
        return {"token": token, "expire": expire, "signature": signature}

    async def health_check(self) -> bool:
        """Lists at most one file; any failure means unavailable."""
        try:
            await self._request("GET", "/files", params={"limit": 1})
            return True
        except AssetStoreError as e:
            logger.warning("ImageKit health check failed: %s", e.message)
            return False


# ── Singleton Instance ────────────────────────────────────────────────────
imagekit_client = ImageKitClient()
