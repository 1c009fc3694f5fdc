"""Jinja2 templates and the admin shell context."""

from pathlib import Path
from typing import Any

from fastapi import Request, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from roomspa_admin.config import settings
from roomspa_admin.core.formatting import TEMPLATE_FILTERS, lookup, ratio_percent
from roomspa_admin.core.navigation import NAVIGATION, SidebarState, is_active, resolve_title
from roomspa_admin.core.session import load_session, pop_flashes

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters.update(TEMPLATE_FILTERS)
templates.env.globals.update(
    app_name=settings.app_name,
    navigation=NAVIGATION,
    is_active=is_active,
    lookup=lookup,
    ratio_percent=ratio_percent,
)


def shell_context(request: Request) -> dict[str, Any]:
    """Context shared by every page rendered inside the admin shell."""
    path = request.url.path
    session = load_session(request)
    return {
        "request": request,
        "current_path": path,
        "page_title": resolve_title(path),
        "sidebar": SidebarState.for_path(path),
        "user": session.user,
        "flashes": pop_flashes(request),
    }


def render(
    request: Request,
    template: str,
    status_code: int = status.HTTP_200_OK,
    **context: Any,
) -> HTMLResponse:
    """Render a template with the shell context merged in."""
    return templates.TemplateResponse(
        request,
        template,
        {**shell_context(request), **context},
        status_code=status_code,
    )
