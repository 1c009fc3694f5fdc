"""Row actions shared by the list pages.

An action calls the backend once and redirects back to the list, which
re-fetches server state. Failures are reported as a flash message.
"""

from collections.abc import Awaitable, Callable

import structlog
from fastapi import Request, status
from fastapi.responses import RedirectResponse

from roomspa_admin.core.exceptions import AppException
from roomspa_admin.core.session import flash
from roomspa_admin.schemas.common import Envelope

logger = structlog.get_logger()


def safe_next(value: object, default: str) -> str:
    """Only follow redirects that stay inside the admin area."""
    target = str(value or "")
    if target.startswith("/admin") and "//" not in target and "\\" not in target:
        return target
    return default


async def run_action(
    request: Request,
    call: Callable[[], Awaitable[Envelope]],
    success_message: str,
    default_next: str,
    resource: str,
) -> RedirectResponse:
    """
    Perform a mutating call and go back to the originating page.

    Args:
        request: Request carrying an optional ``next`` form field
        call: Backend action
        success_message: Flash text on success
        default_next: Page to return to when ``next`` is missing
        resource: Label for log events

    Returns:
        303 redirect back to the list
    """
    form = await request.form()
    target = safe_next(form.get("next"), default_next)

    try:
        envelope = await call()
    except AppException as e:
        logger.error("action_failed", resource=resource, error=e.message)
        flash(request, f"Action failed: {e.message}", "error")
    else:
        if envelope.success:
            logger.info("action_succeeded", resource=resource)
            flash(request, envelope.message or success_message, "success")
        else:
            logger.warning("action_rejected", resource=resource, message=envelope.message)
            flash(request, envelope.message or "Action failed", "error")

    return RedirectResponse(target, status_code=status.HTTP_303_SEE_OTHER)
