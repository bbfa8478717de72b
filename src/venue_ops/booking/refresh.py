"""Countdown that gates re-fetching band data after a refresh was triggered."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

REFRESH_WAIT_SECONDS = 240


def format_seconds(seconds: int) -> str:
    """``m:ss``, e.g. 240 -> ``4:00``."""
    seconds = max(0, seconds)
    return f"{seconds // 60}:{seconds % 60:02d}"


class RefreshCountdown:
    """Ticks once per ``tick`` seconds and calls ``on_done`` when it reaches 0.

    ``on_tick`` receives the remaining whole seconds after each tick.
    """

    def __init__(
        self,
        on_done: Callable[[], Awaitable[object]],
        *,
        seconds: int = REFRESH_WAIT_SECONDS,
        tick: float = 1.0,
        on_tick: Callable[[int], None] | None = None,
    ) -> None:
        self._on_done = on_done
        self._seconds = seconds
        self._tick = tick
        self._on_tick = on_tick
        self._task: asyncio.Task | None = None
        self.remaining = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def display(self) -> str:
        return format_seconds(self.remaining)

    def start(self) -> asyncio.Task:
        """Start (or restart) the countdown. Needs a running event loop."""
        self.cancel()
        self.remaining = self._seconds
        self._task = asyncio.get_running_loop().create_task(self._run())
        return self._task

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
            logger.debug("Refresh countdown cancelled at %ss", self.remaining)
        self._task = None

    async def wait(self) -> None:
        """Wait for the current countdown to finish; returns at once if idle."""
        if self._task is None:
            return
        try:
            await self._task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        while self.remaining > 0:
            await asyncio.sleep(self._tick)
            self.remaining -= 1
            if self._on_tick is not None:
                self._on_tick(self.remaining)
        logger.debug("Refresh countdown finished")
        await self._on_done()
