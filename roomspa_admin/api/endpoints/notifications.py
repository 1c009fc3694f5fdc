"""Broadcast push notifications."""

from typing import Any

import structlog
from fastapi import APIRouter, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from pydantic import ValidationError

from roomspa_admin.core.exceptions import AppException
from roomspa_admin.core.session import flash
from roomspa_admin.core.templating import render
from roomspa_admin.dependencies import Backend
from roomspa_admin.schemas.common import describe_errors
from roomspa_admin.schemas.notifications import AUDIENCES, NotificationForm, recipient_count
from roomspa_admin.services.backend_client import BackendClient

logger = structlog.get_logger()

router = APIRouter()


async def _load_tokens(backend: BackendClient) -> list[Any]:
    """Device token counts per audience; empty when unavailable."""
    try:
        envelope = await backend.notifications.tokens()
    except AppException as e:
        logger.error("tokens_fetch_failed", error=e.message)
        return []
    if not envelope.success or not isinstance(envelope.data, list):
        logger.warning("tokens_unavailable", message=envelope.message)
        return []
    return envelope.data


async def _notifications_page(
    request: Request,
    backend: BackendClient,
    values: dict[str, str],
    error: str | None = None,
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    tokens = await _load_tokens(backend)
    return render(
        request,
        "notifications.html",
        status_code=status_code,
        values=values,
        audiences=AUDIENCES,
        recipients={audience: recipient_count(tokens, audience) for audience in AUDIENCES},
        error=error,
    )


@router.get("/notifications", response_class=HTMLResponse, summary="Notifications")
async def notifications_page(
    request: Request,
    backend: Backend,
    user_type: str = Query("all"),
) -> HTMLResponse:
    if user_type not in AUDIENCES:
        user_type = "all"
    values = {"title": "", "message": "", "user_type": user_type}
    return await _notifications_page(request, backend, values)


@router.post("/notifications", response_class=HTMLResponse, summary="Send notification")
async def send_notification(request: Request, backend: Backend) -> Response:
    """
    Send a notification to one audience.

    Title and message are required. On failure the form is shown again with
    the text kept.
    """
    form = await request.form()
    values = {
        "title": str(form.get("title") or ""),
        "message": str(form.get("message") or ""),
        "user_type": str(form.get("user_type") or "all"),
    }

    try:
        notification = NotificationForm.model_validate(values)
    except ValidationError as e:
        return await _notifications_page(
            request, backend, values, describe_errors(e), status.HTTP_400_BAD_REQUEST
        )

    try:
        envelope = await backend.notifications.send(
            notification.title, notification.message, notification.user_type
        )
    except AppException as e:
        logger.error("notification_send_failed", error=e.message)
        return await _notifications_page(
            request, backend, values, "Failed to send notification", e.status_code
        )

    if not envelope.success:
        logger.warning("notification_rejected", message=envelope.message)
        return await _notifications_page(
            request,
            backend,
            values,
            envelope.message or "Failed to send notification",
            status.HTTP_502_BAD_GATEWAY,
        )

    logger.info("notification_sent", user_type=notification.user_type)
    flash(request, "Notification sent successfully!", "success")
    return RedirectResponse("/admin/notifications", status_code=status.HTTP_303_SEE_OTHER)
