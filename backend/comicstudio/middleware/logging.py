"""
Comic Studio Backend — Access Log Middleware
==============================================

What:  One log line per HTTP request on the "comicstudio.access" logger.

Line format:
    PUT /api/chapters/9f1c... 200 41.3ms [a1b2c3d4] from 10.0.0.7

    Level follows the status: 5xx → ERROR, 4xx → WARNING, else INFO.
    The same values are attached as `extra` fields for structured handlers.
    Request bodies are never logged; chapter documents can be large and
    signup/login bodies carry passwords.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from comicstudio.middleware.request_id import request_id_var

logger = logging.getLogger("comicstudio.access")

QUIET_PATHS = frozenset({"/", "/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access logging with duration; liveness probes are not logged."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")
        status = response.status_code
        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
