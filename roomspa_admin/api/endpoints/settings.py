"""Application settings page."""

import structlog
from fastapi import APIRouter, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from roomspa_admin.core.exceptions import AppException
from roomspa_admin.core.session import flash
from roomspa_admin.core.templating import render
from roomspa_admin.dependencies import Backend
from roomspa_admin.schemas.settings import (
    SETTINGS_TABS,
    SettingsFormError,
    TIMEZONES,
    merge_settings,
    parse_settings_form,
)
from roomspa_admin.services.page_data import fetch_payload

logger = structlog.get_logger()

router = APIRouter()


def _settings_page(
    request: Request,
    values: dict,
    tab: str,
    error: str | None = None,
    warning: str | None = None,
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    return render(
        request,
        "settings.html",
        status_code=status_code,
        values=values,
        tabs=SETTINGS_TABS,
        tab=tab if tab in SETTINGS_TABS else "general",
        timezones=TIMEZONES,
        error=error,
        warning=warning,
    )


@router.get("/settings", response_class=HTMLResponse, summary="Settings")
async def settings_page(
    request: Request,
    backend: Backend,
    tab: str = Query("general"),
) -> HTMLResponse:
    """Current settings, or the defaults with a warning when they cannot be loaded."""
    payload = await fetch_payload(backend.settings.get, "settings")
    warning = None
    if not payload.available:
        warning = "Stored settings could not be loaded; showing defaults."
    return _settings_page(request, merge_settings(payload.data), tab, warning=warning)


@router.post("/settings", response_class=HTMLResponse, summary="Save settings")
async def save_settings(request: Request, backend: Backend) -> Response:
    """Send the complete settings object built from every section."""
    form = await request.form()
    tab = str(form.get("tab") or "general")
    if tab not in SETTINGS_TABS:
        tab = "general"
    current = await fetch_payload(backend.settings.get, "settings")
    try:
        values = parse_settings_form(form, merge_settings(current.data))
    except SettingsFormError as e:
        logger.info("settings_invalid", fields=len(e.errors))
        return _settings_page(
            request, e.values, tab, error=str(e), status_code=status.HTTP_400_BAD_REQUEST
        )

    try:
        envelope = await backend.settings.update(values)
    except AppException as e:
        logger.error("settings_save_failed", error=e.message)
        return _settings_page(
            request, values, tab, error="Failed to save settings", status_code=e.status_code
        )

    if not envelope.success:
        logger.warning("settings_save_rejected", message=envelope.message)
        return _settings_page(
            request,
            values,
            tab,
            error=envelope.message or "Failed to save settings",
            status_code=status.HTTP_502_BAD_GATEWAY,
        )

    logger.info("settings_saved", tab=tab)
    flash(request, "Settings saved successfully!", "success")
    return RedirectResponse(f"/admin/settings?tab={tab}", status_code=status.HTTP_303_SEE_OTHER)
