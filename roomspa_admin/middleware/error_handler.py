"""Error handling middleware.

Admin pages never show a raw traceback or a blank screen: failures that reach
this layer render a small standalone error page. A missing session turns
into a redirect to the login page.
"""

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from roomspa_admin.core.exceptions import AppException, SessionRequiredException
from roomspa_admin.core.templating import templates

logger = structlog.get_logger()

LOGIN_PATH = "/login"


def _error_page(request: Request, status_code: int, title: str, message: str) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "error.html",
        {"status_code": status_code, "title": title, "message": message},
        status_code=status_code,
    )


async def app_exception_handler(request: Request, exc: AppException) -> Response:
    """
    Handle custom application exceptions.

    Args:
        request: Request object
        exc: Application exception

    Returns:
        Redirect to the login page for a missing session, else an error page
    """
    if isinstance(exc, SessionRequiredException):
        logger.info("session_required", path=request.url.path)
        return RedirectResponse(LOGIN_PATH, status_code=status.HTTP_303_SEE_OTHER)

    logger.warning(
        "app_exception",
        error=exc.__class__.__name__,
        message=exc.message,
        path=request.url.path,
    )
    return _error_page(request, exc.status_code, exc.__class__.__name__, exc.message)


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> Response:
    """
    Handle HTTP exceptions.

    Args:
        request: Request object
        exc: HTTP exception

    Returns:
        Error page with the exception's status code
    """
    title = "Page Not Found" if exc.status_code == status.HTTP_404_NOT_FOUND else "Error"
    return _error_page(request, exc.status_code, title, str(exc.detail))


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> Response:
    """
    Handle validation errors of query and path parameters.

    Args:
        request: Request object
        exc: Validation exception

    Returns:
        Error page listing the invalid parameters
    """
    fields = ", ".join(
        ".".join(str(part) for part in error.get("loc", ())) for error in exc.errors()
    )
    return _error_page(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Invalid Request",
        f"Request validation failed: {fields}",
    )


async def general_exception_handler(request: Request, exc: Exception) -> Response:
    """
    Handle unexpected exceptions.

    Args:
        request: Request object
        exc: Exception

    Returns:
        Generic error page
    """
    logger.exception("unhandled_exception", path=request.url.path, error=str(exc))
    return _error_page(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Something went wrong",
        "An unexpected error occurred",
    )
