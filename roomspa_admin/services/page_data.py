"""Single-payload pages: dashboard, analytics, reports, live status."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import structlog

from roomspa_admin.core.exceptions import AppException
from roomspa_admin.schemas.common import Envelope

logger = structlog.get_logger()


@dataclass(frozen=True)
class PagePayload:
    """Aggregate payload of a page, or the reason it is missing."""

    data: dict[str, Any] | None = None
    error: str | None = None
    placeholder: bool = False

    @property
    def available(self) -> bool:
        return self.data is not None


async def fetch_payload(
    fetch: Callable[[], Awaitable[Envelope]],
    name: str,
    placeholder: dict[str, Any] | None = None,
) -> PagePayload:
    """
    Fetch one aggregate payload and degrade on any failure.

    Args:
        fetch: Backend call
        name: Payload label for log events
        placeholder: Values shown instead of nothing when the fetch fails

    Returns:
        The payload, the placeholder, or an empty result carrying the error
    """
    try:
        envelope = await fetch()
    except AppException as e:
        error = e.message
    else:
        if envelope.success and isinstance(envelope.data, dict):
            return PagePayload(data=envelope.data)
        error = envelope.message or "No data returned"

    logger.error("payload_fetch_failed", payload=name, error=error)
    if placeholder is not None:
        return PagePayload(data=placeholder, error=error, placeholder=True)
    return PagePayload(error=error)
