"""
Comic Studio Backend — Route Dependencies
===========================================

What:  Session helpers shared by route modules.
How:   Starlette's SessionMiddleware exposes a signed-cookie dict as
       request.session; these helpers read and write the keys below.

Session keys:
    user_id: str(UUID) of the logged-in user
    username: display name, for convenience
    is_admin: bool
"""

from uuid import UUID

from fastapi import Request

from comicstudio.exceptions import AuthenticationError
from comicstudio.models.user import User


def start_session(request: Request, user: User) -> None:
    request.session["user_id"] = str(user.id)
    request.session["username"] = user.username
    request.session["is_admin"] = bool(user.is_admin)


def end_session(request: Request) -> None:
    request.session.clear()


def get_current_user_id(request: Request) -> UUID:
    """
    FastAPI dependency guarding private routes.

    Raises:
        AuthenticationError: no session, or a session value that is not a UUID
    """
    raw = request.session.get("user_id")
    if not raw:
        raise AuthenticationError()
    try:
        return UUID(str(raw))
    except ValueError:
        end_session(request)
        raise AuthenticationError()
