"""Session cookie handling and the authenticated-user dependencies.

Routers of other contexts depend on these too, so the lookup always runs
inside the identity domain context whatever context the request is in.
"""

from fastapi import Depends, Request, Response

from identity.domain import identity
from identity.session.authentication import current_user
from identity.user.user import User
from shared.exceptions import Unauthorized
from shared.settings import get_settings


def session_id_from(request: Request) -> str | None:
    return request.cookies.get(get_settings().session_cookie_name)


async def optional_user(request: Request) -> User | None:
    with identity.domain_context():
        return current_user(session_id_from(request))


async def require_user(user: User | None = Depends(optional_user)) -> User:
    if user is None:
        raise Unauthorized()
    return user


def set_session_cookie(response: Response, session_id: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session_id,
        max_age=settings.session_ttl_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )
