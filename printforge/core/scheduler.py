"""
Delay primitives for the status poller.

The poller never calls asyncio.sleep directly; it goes through a Scheduler
so tests can drive it without real timers.
"""

import asyncio
import time
from typing import Protocol

from .cancellation import CancellationToken


class Scheduler(Protocol):
    """Source of delays and time for a generation flow."""

    async def sleep(self, seconds: float, token: CancellationToken | None = None) -> None:
        """Wait for the given delay, returning early if the token is cancelled."""
        ...

    def now(self) -> float:
        """Monotonic time in seconds."""
        ...


class AsyncioScheduler:
    """Scheduler backed by the running event loop."""

    async def sleep(self, seconds: float, token: CancellationToken | None = None) -> None:
        if token is None:
            await asyncio.sleep(seconds)
            return
        try:
            await asyncio.wait_for(token.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass

    def now(self) -> float:
        return time.monotonic()


class ManualScheduler:
    """Scheduler for tests: records every delay and advances a virtual clock."""

    def __init__(self, start: float = 0.0) -> None:
        self.delays: list[float] = []
        self._now = start

    async def sleep(self, seconds: float, token: CancellationToken | None = None) -> None:
        self.delays.append(seconds)
        self._now += seconds
        # Still yield so other coroutines interleave as they would with real timers
        await asyncio.sleep(0)

    def now(self) -> float:
        return self._now

    @property
    def total_slept(self) -> float:
        return sum(self.delays)
