"""Logging middleware and configuration."""

import logging
import sys
import time
import uuid
from collections.abc import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from roomspa_admin.config import settings

# Liveness and scrape paths that would drown the request log
QUIET_PATHS = ("/ping", "/metrics")
EVENT_STREAM = "text/event-stream"


def configure_logging() -> None:
    """Configure structured logging."""
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.log_format == "json":
        processors = shared_processors + [
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Configure standard logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level.upper()),
    )
    # httpx logs every request at INFO; the backend client already does
    logging.getLogger("httpx").setLevel(logging.WARNING)



def _admin_email(request: Request) -> str | None:
    # Set by the session dependency; shared through the request scope
    session = getattr(request.state, "admin_session", None)
    if session is None or session.user is None:
        return None
    return session.user.email or None


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Log each page view with its request id and the signed-in admin.

    Every request gets a short id, bound into the structlog context so that
    backend calls made while serving it carry the same id, and returned as
    ``X-Request-ID``. Event streams are tagged with ``stream=True``; their
    duration is the time to the response headers, not the life of the stream.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        logger = structlog.get_logger()
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
        start_time = time.perf_counter()
        structlog.contextvars.bind_contextvars(request_id=request_id, path=request.url.path)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                method=request.method,
                admin=_admin_email(request),
                error=str(e),
                duration=time.perf_counter() - start_time,
            )
            raise
        finally:
            structlog.contextvars.unbind_contextvars("request_id", "path")

        duration = time.perf_counter() - start_time
        is_stream = response.headers.get("content-type", "").startswith(EVENT_STREAM)
        logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            stream=is_stream,
            admin=_admin_email(request),
            request_id=request_id,
            duration=round(duration, 4),
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{duration:.4f}"
        return response
