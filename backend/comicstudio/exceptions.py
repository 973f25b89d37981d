"""
Comic Studio Backend — Custom Exception Hierarchy
===================================================

What:  Defines application-specific exceptions for different error scenarios.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services, dependencies and middleware; caught by global handlers.

Exception Hierarchy:
    ComicStudioError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── AuthenticationError      → 401 Unauthorized (no session / bad credentials)
    ├── PermissionDeniedError    → 403 Forbidden (not the owner)
    ├── NotFoundError            → 404 Not Found
    ├── AssetStoreError          → 502 Bad Gateway (image host failed)
    ├── DatabaseError            → 500 Internal Server Error
    └── RateLimitExceededError   → 429 Too Many Requests

Note:
    Asset deletion failures are NOT raised through this hierarchy to the
    client. AssetCleanupService logs and swallows them; AssetStoreError only
    reaches a response when the caller is waiting on the asset store
    (e.g. upload authentication).
"""

from typing import Any, Dict, Optional


class ComicStudioError(Exception):
    """
    Base exception for all Comic Studio application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ComicStudioError):
    """
    Raised when client input fails a business rule.

    When:    Missing series title/author, duplicate email on signup.
    HTTP:    400 Bad Request

    Schema-level problems (wrong JSON types) are handled by FastAPI with 422.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(ComicStudioError):
    """
    Raised when a request needs a session and has none, or login fails.

    HTTP:    401 Unauthorized
    """

    def __init__(
        self,
        message: str = "Not authorized, no session found",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PermissionDeniedError(ComicStudioError):
    """
    Raised when the session user does not own the target resource.

    When:    Editing a series or chapter that belongs to someone else.
    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "Not authorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(ComicStudioError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PUT on a series, chapter or user id that is not stored.
    HTTP:    404 Not Found

    SQLAlchemy returns None for missing records; services convert that
    into this exception so routes stay free of None checks.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        if resource_id:
            message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class AssetStoreError(ComicStudioError):
    """
    Raised when the external image host (ImageKit) fails or is misconfigured.

    HTTP:    502 Bad Gateway

    Carries the upstream status code in context when there is one.
    """

    def __init__(
        self,
        message: str = "Image hosting service request failed",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code


class DatabaseError(ComicStudioError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic; detailed error
    info is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(ComicStudioError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
