"""Login and logout."""

import structlog
from fastapi import APIRouter, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from pydantic import ValidationError

from roomspa_admin.core.exceptions import AppException
from roomspa_admin.core.session import clear_session, flash, save_session
from roomspa_admin.core.templating import render
from roomspa_admin.dependencies import Backend, OptionalSession
from roomspa_admin.schemas.auth import LoginForm

logger = structlog.get_logger()

router = APIRouter()

DASHBOARD_PATH = "/admin"
LOGIN_PATH = "/login"


@router.get("/", include_in_schema=False)
async def root() -> RedirectResponse:
    return RedirectResponse(DASHBOARD_PATH, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/login", response_class=HTMLResponse, summary="Login page")
async def login_page(request: Request, session: OptionalSession) -> Response:
    """Show the login form, or go straight to the dashboard when signed in."""
    if session.is_authenticated:
        return RedirectResponse(DASHBOARD_PATH, status_code=status.HTTP_303_SEE_OTHER)
    return render(request, "login.html", email="", error=None)


@router.post("/login", response_class=HTMLResponse, summary="Sign in")
async def login(request: Request, backend: Backend) -> Response:
    """
    Exchange credentials for a backend token.

    On failure the form is shown again with the e-mail kept.
    """
    form = await request.form()
    email = str(form.get("email") or "").strip()
    password = str(form.get("password") or "")

    try:
        credentials = LoginForm(email=email, password=password)
    except ValidationError:
        return render(
            request,
            "login.html",
            status_code=status.HTTP_400_BAD_REQUEST,
            email=email,
            error="Enter a valid e-mail address and password",
        )

    try:
        envelope = await backend.auth.login(credentials.email, credentials.password)
    except AppException as e:
        logger.error("login_failed", email=email, error=e.message)
        return render(
            request,
            "login.html",
            status_code=status.HTTP_502_BAD_GATEWAY,
            email=email,
            error="The server could not be reached. Please try again.",
        )

    token = envelope.data_dict().get("token")
    if not envelope.success or not token:
        logger.info("login_rejected", email=email, message=envelope.message)
        return render(
            request,
            "login.html",
            status_code=status.HTTP_401_UNAUTHORIZED,
            email=email,
            error=envelope.message or "Invalid credentials",
        )

    user = envelope.data_dict().get("user")
    save_session(request, str(token), user if isinstance(user, dict) else None)
    logger.info("login_succeeded", email=email)
    return RedirectResponse(DASHBOARD_PATH, status_code=status.HTTP_303_SEE_OTHER)


@router.post("/logout", summary="Sign out")
async def logout(request: Request, backend: Backend, session: OptionalSession) -> Response:
    """Tell the backend, then forget the session regardless of its answer."""
    if session.is_authenticated:
        try:
            await backend.auth.logout()
        except AppException as e:
            logger.warning("logout_backend_failed", error=e.message)
    clear_session(request)
    flash(request, "You have been signed out", "info")
    return RedirectResponse(LOGIN_PATH, status_code=status.HTTP_303_SEE_OTHER)
