"""Admin session stored in the signed session cookie.

Two string values are persisted: the backend token and a JSON-encoded user
record. They are read once per request into an :class:`AdminSession`.
"""

import json
from typing import Any

import structlog
from pydantic import BaseModel, ValidationError
from starlette.requests import Request

logger = structlog.get_logger()

TOKEN_KEY = "admin_token"
USER_KEY = "admin_user"
FLASH_KEY = "_flashes"


class AdminUser(BaseModel):
    """Signed-in administrator as returned by the login endpoint."""

    id: str | int | None = None
    name: str = "Admin"
    email: str = ""
    role: str = "admin"

    @property
    def initial(self) -> str:
        return (self.name or "A")[:1].upper()


class AdminSession(BaseModel):
    """Typed view of the persisted session."""

    token: str | None = None
    user: AdminUser | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)


def _parse_user(raw: Any) -> AdminUser | None:
    if not raw:
        return None
    try:
        data = json.loads(raw) if isinstance(raw, str) else raw
        return AdminUser.model_validate(data)
    except (ValueError, TypeError, ValidationError) as e:
        logger.warning("session_user_unreadable", error=str(e))
        return None


def load_session(request: Request) -> AdminSession:
    """Read the session once and memoize it on the request."""
    cached = getattr(request.state, "admin_session", None)
    if cached is not None:
        return cached

    token = request.session.get(TOKEN_KEY)
    session = AdminSession(
        token=token if isinstance(token, str) and token else None,
        user=_parse_user(request.session.get(USER_KEY)),
    )
    request.state.admin_session = session
    return session


def save_session(request: Request, token: str, user: dict[str, Any] | None) -> AdminSession:
    """Persist a freshly issued token and user record."""
    request.session[TOKEN_KEY] = token
    if user:
        request.session[USER_KEY] = json.dumps(user)
    else:
        request.session.pop(USER_KEY, None)
    request.state.admin_session = AdminSession(token=token, user=_parse_user(user))
    return request.state.admin_session


def clear_session(request: Request) -> None:
    """Forget the token and user record."""
    request.session.pop(TOKEN_KEY, None)
    request.session.pop(USER_KEY, None)
    request.state.admin_session = AdminSession()


def flash(request: Request, message: str, category: str = "info") -> None:
    """Queue a one-shot message for the next rendered page."""
    messages = list(request.session.get(FLASH_KEY, []))
    messages.append({"message": message, "category": category})
    request.session[FLASH_KEY] = messages


def pop_flashes(request: Request) -> list[dict[str, str]]:
    """Return and clear queued messages."""
    return request.session.pop(FLASH_KEY, None) or []
