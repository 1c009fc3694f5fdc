"""Interval polling for the live dashboard pages."""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable

import structlog

from roomspa_admin.core.exceptions import AppException
from roomspa_admin.schemas.common import Envelope

logger = structlog.get_logger()


class Poller:
    """
    Fetch a payload now and then every ``interval`` seconds until stopped.

    Polls never overlap. Each poll takes a new generation; a result is only
    delivered if its generation is still current and the poller is running,
    so nothing arrives after :meth:`stop`.
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[Envelope]],
        interval: float,
        name: str = "poller",
    ):
        """
        Args:
            fetch: Backend call returning an envelope
            interval: Seconds between the end of one poll and the next
            name: Label used in log events
        """
        self.fetch = fetch
        self.interval = interval
        self.name = name
        self.generation = 0
        self.fetch_count = 0
        self._stopped = asyncio.Event()
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return not self._stopped.is_set()

    async def poll_once(self) -> Envelope | None:
        """
        Run one poll.

        Returns:
            The envelope, or None when the result is stale or the poller
            stopped while the request was in flight
        """
        if not self.running:
            return None
        self.generation += 1
        generation = self.generation
        self.fetch_count += 1
        try:
            envelope = await self.fetch()
        except AppException as e:
            logger.error("poll_failed", poller=self.name, error=e.message)
            envelope = Envelope.failure(e.message, status_code=e.status_code)

        if not self.running or generation != self.generation:
            logger.debug("poll_result_discarded", poller=self.name, generation=generation)
            return None
        if not envelope.success:
            logger.warning("poll_unsuccessful", poller=self.name, message=envelope.message)
        return envelope

    async def results(self) -> AsyncIterator[Envelope]:
        """Yield poll results until stopped."""
        while self.running:
            envelope = await self.poll_once()
            if envelope is not None:
                yield envelope
            try:
                await asyncio.wait_for(self._stopped.wait(), timeout=self.interval)
            except TimeoutError:
                continue

    def start(self, on_result: Callable[[Envelope], None]) -> asyncio.Task:
        """Poll in a background task, handing each result to ``on_result``."""

        async def run() -> None:
            async for envelope in self.results():
                on_result(envelope)

        self._task = asyncio.create_task(run(), name=f"poller:{self.name}")
        return self._task

    async def stop(self) -> None:
        """Cancel the timer and drop any in-flight result."""
        self._stopped.set()
        # Invalidate a poll that is still awaiting the backend
        self.generation += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
