"""FastAPI dependencies."""

from typing import Annotated

import httpx
from fastapi import Depends, Request

from roomspa_admin.core.exceptions import SessionRequiredException
from roomspa_admin.core.session import AdminSession, load_session
from roomspa_admin.services.backend_client import BackendClient


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Shared backend connection pool created in the application lifespan."""
    return request.app.state.http_client


def get_session(request: Request) -> AdminSession:
    """Typed session, read once per request."""
    return load_session(request)


async def require_session(
    session: Annotated[AdminSession, Depends(get_session)],
) -> AdminSession:
    """
    Gate admin pages on the presence of a session token.

    Raises:
        SessionRequiredException: If no token is stored; handled as a
            redirect to the login page
    """
    if not session.is_authenticated:
        raise SessionRequiredException()
    return session


def get_backend(
    http: Annotated[httpx.AsyncClient, Depends(get_http_client)],
    session: Annotated[AdminSession, Depends(get_session)],
) -> BackendClient:
    """Backend client carrying the session token."""
    return BackendClient(http, token=session.token)


# Type aliases for dependency injection
OptionalSession = Annotated[AdminSession, Depends(get_session)]
Backend = Annotated[BackendClient, Depends(get_backend)]
