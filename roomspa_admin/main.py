"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from roomspa_admin.api.router import api_router
from roomspa_admin.config import settings
from roomspa_admin.core.exceptions import AppException
from roomspa_admin.middleware.error_handler import (
    app_exception_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from roomspa_admin.middleware.logging import LoggingMiddleware, configure_logging
from roomspa_admin.services.backend_client import create_http_client

# Configure logging
configure_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Opens the shared backend connection pool on startup and closes it on
    shutdown.
    """
    logger.info(
        "application_startup",
        environment=settings.environment,
        backend=settings.backend_base_url,
    )
    app.state.http_client = create_http_client()

    yield

    logger.info("application_shutdown")
    await app.state.http_client.aclose()
    logger.info("backend_client_closed")


def create_app() -> FastAPI:
    """Build the admin application."""
    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Administration dashboard for the RoomSpa booking platform",
        docs_url="/docs" if settings.debug else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # Signed-cookie session holding the admin token and profile
    application.add_middleware(
        SessionMiddleware,
        secret_key=settings.secret_key,
        session_cookie=settings.session_cookie,
        max_age=settings.session_max_age,
        same_site="lax",
        https_only=settings.is_production,
    )

    # Add logging middleware
    application.add_middleware(LoggingMiddleware)

    # Add exception handlers
    application.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    application.add_exception_handler(
        StarletteHTTPException, http_exception_handler  # type: ignore[arg-type]
    )
    application.add_exception_handler(
        RequestValidationError, validation_exception_handler  # type: ignore[arg-type]
    )
    application.add_exception_handler(Exception, general_exception_handler)

    application.include_router(api_router)

    # Setup Prometheus instrumentation
    Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        excluded_handlers=["/metrics", "/admin/monitoring/stream", "/admin/system/stream"],
    ).instrument(application).expose(application, endpoint="/metrics", include_in_schema=False)

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "roomspa_admin.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
    )
