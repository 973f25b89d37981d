"""
Comic Studio Backend — Rate Limiting Middleware
=================================================

What:  Per-client sliding-window limit (RATE_LIMIT_REQUESTS per
       RATE_LIMIT_WINDOW seconds), answering 429 with Retry-After.
How:   In-memory deque of request timestamps per client address. The
       client address is the first X-Forwarded-For hop when the app sits
       behind a proxy, otherwise the socket peer.

Single-process only: each uvicorn worker keeps its own counters.
"""

import logging
import time
from collections import defaultdict, deque
from typing import Deque, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from comicstudio.config import settings
from comicstudio.exceptions import RateLimitExceededError
from comicstudio.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


def client_address(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    EXCLUDED_PATHS = frozenset({"/", "/health", "/docs", "/openapi.json", "/redoc"})

    def __init__(
        self,
        app,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
    ):
        super().__init__(app)
        self.max_requests = max_requests or settings.rate_limit_requests
        self.window_seconds = window_seconds or settings.rate_limit_window
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._seen = 0

    def check(self, client: str, now: float) -> None:
        """Record one hit for `client` or raise RateLimitExceededError."""
        hits = self._hits[client]
        window_start = now - self.window_seconds
        while hits and hits[0] <= window_start:
            hits.popleft()

        if len(hits) >= self.max_requests:
            retry_after = int(hits[0] + self.window_seconds - now) + 1
            raise RateLimitExceededError(retry_after=retry_after, context={"client": client})

        hits.append(now)
        self._seen += 1
        if self._seen % 1000 == 0:
            self._forget_idle(window_start)

    def _forget_idle(self, window_start: float) -> None:
        idle = [c for c, hits in self._hits.items() if not hits or hits[-1] <= window_start]
        for c in idle:
            del self._hits[c]
        if idle:
            logger.debug("Dropped rate-limit state for %d idle client(s)", len(idle))

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        client = client_address(request)
        try:
            self.check(client, time.time())
        except RateLimitExceededError as e:
            logger.warning(
                "Rate limit exceeded for %s: %d requests in %ds",
                client,
                self.max_requests,
                self.window_seconds,
            )
            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": e.message,
                    "details": {"retry_after": e.retry_after},
                    "request_id": request_id_var.get(""),
                },
                headers={"Retry-After": str(e.retry_after)},
            )

        return await call_next(request)
