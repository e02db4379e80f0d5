"""
Cooperative cancellation for generation flows.

A token is checked by the poller before every delay and every status
query. Setting it never interrupts a query already in flight.
"""

import asyncio

import structlog

logger = structlog.get_logger(__name__)


class CancellationToken:
    """One-shot cancellation flag that sleeping pollers can wait on."""

    def __init__(self) -> None:
        self._cancelled = False
        self._event: asyncio.Event | None = None
        self.reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self, reason: str | None = None) -> bool:
        """Signal cancellation. Returns False if it was already signalled."""
        if self._cancelled:
            return False
        self._cancelled = True
        self.reason = reason
        if self._event is not None:
            self._event.set()
        logger.info("Cancellation requested", reason=reason)
        return True

    async def wait(self) -> None:
        """Block until cancellation is signalled."""
        if self._cancelled:
            return
        if self._event is None:
            self._event = asyncio.Event()
        await self._event.wait()
