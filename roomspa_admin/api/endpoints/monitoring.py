"""Live monitoring and system health.

Both pages render once with fresh data and then subscribe to a server-sent
events stream. The stream re-renders the status panel on every poll and
stops polling as soon as the browser goes away.
"""

import json
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import aclosing
from datetime import UTC, datetime

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse, StreamingResponse

from roomspa_admin.config import settings
from roomspa_admin.core.templating import render, templates
from roomspa_admin.dependencies import Backend
from roomspa_admin.schemas.common import Envelope
from roomspa_admin.services.charts import rows
from roomspa_admin.services.page_data import fetch_payload
from roomspa_admin.services.poller import Poller

logger = structlog.get_logger()

router = APIRouter()

MONITORING_PANEL = "partials/monitoring_panel.html"
SYSTEM_PANEL = "partials/system_panel.html"


def panel_context(data: dict | None, error: str | None) -> dict:
    data = data or {}
    return {
        "data": data,
        "error": error,
        "alerts": rows(data, "recent_alerts"),
        "indicators": rows(data, "health_indicators"),
        "updated_at": datetime.now(UTC),
    }


def sse_event(payload: dict, event: str = "update") -> str:
    """Encode one server-sent event; the payload travels as a single JSON line."""
    return f"event: {event}\ndata: {json.dumps(payload, default=str)}\n\n"


def render_panel(template: str, envelope: Envelope) -> str:
    data = envelope.data if envelope.success and isinstance(envelope.data, dict) else None
    error = None if data is not None else envelope.message or "No data returned"
    return templates.get_template(template).render(panel_context(data, error))


async def stream_panel(
    request: Request,
    poller: Poller,
    template: str,
    limit: int | None = None,
) -> AsyncIterator[str]:
    """
    Yield one event per poll until the client disconnects.

    Args:
        request: Streaming request, checked for disconnection
        poller: Poller producing envelopes
        template: Panel partial to render
        limit: Stop after this many events
    """
    sent = 0
    logger.info("stream_opened", poller=poller.name)
    try:
        async with aclosing(poller.results()) as results:
            async for envelope in results:
                if await request.is_disconnected():
                    break
                yield sse_event(
                    {
                        "success": envelope.success,
                        "message": envelope.message,
                        "html": render_panel(template, envelope),
                    }
                )
                sent += 1
                if limit is not None and sent >= limit:
                    break
    finally:
        await poller.stop()
        logger.info("stream_closed", poller=poller.name, fetches=poller.fetch_count)


def _stream_response(
    request: Request,
    fetch: Callable[[], Awaitable[Envelope]],
    interval: float,
    name: str,
    template: str,
    limit: int | None,
) -> StreamingResponse:
    poller = Poller(fetch, interval, name=name)
    return StreamingResponse(
        stream_panel(request, poller, template, limit),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.get("/monitoring", response_class=HTMLResponse, summary="Live monitoring")
async def monitoring_page(request: Request, backend: Backend) -> HTMLResponse:
    payload = await fetch_payload(backend.monitoring.live, "monitoring")
    return render(
        request,
        "monitoring.html",
        panel=panel_context(payload.data, payload.error),
        panel_template=MONITORING_PANEL,
        stream_url="/admin/monitoring/stream",
        interval=settings.monitoring_poll_seconds,
    )


@router.get("/monitoring/stream", summary="Live monitoring stream")
async def monitoring_stream(
    request: Request,
    backend: Backend,
    events: int | None = Query(None, ge=1),
) -> StreamingResponse:
    return _stream_response(
        request,
        backend.monitoring.live,
        settings.monitoring_poll_seconds,
        "monitoring",
        MONITORING_PANEL,
        events,
    )


@router.get("/system", response_class=HTMLResponse, summary="System health")
async def system_page(request: Request, backend: Backend) -> HTMLResponse:
    payload = await fetch_payload(backend.monitoring.system_health, "system_health")
    return render(
        request,
        "system.html",
        panel=panel_context(payload.data, payload.error),
        panel_template=SYSTEM_PANEL,
        stream_url="/admin/system/stream",
        interval=settings.system_health_poll_seconds,
    )


@router.get("/system/stream", summary="System health stream")
async def system_stream(
    request: Request,
    backend: Backend,
    events: int | None = Query(None, ge=1),
) -> StreamingResponse:
    return _stream_response(
        request,
        backend.monitoring.system_health,
        settings.system_health_poll_seconds,
        "system_health",
        SYSTEM_PANEL,
        events,
    )
