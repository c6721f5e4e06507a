"""Fixed-interval background routine running on the asyncio event loop.

Used for cache expiry sweeps and the periodic statistics flush. Each routine owns one
asyncio task, so a slow translation request never delays it.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import TYPE_CHECKING

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Awaitable, Callable

__all__: list[str] = ["PeriodicTask"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class PeriodicTask:
    """Run a callback every `interval` seconds until cancelled.

    The callback may be a plain function or a coroutine function. Exceptions raised by the
    callback are logged and the routine keeps running.

    Attributes:
        name (str): Routine name used in log messages and as the asyncio task name.
        interval (float): Seconds to wait between runs.
    """

    def __init__(
        self,
        name: str,
        interval: float,
        callback: Callable[[], object] | Callable[[], Awaitable[object]],
        *,
        wait_first: bool = True,
    ) -> None:
        if interval <= 0:
            msg: str = f"Interval must be positive: {interval}"
            raise ValueError(msg)
        self.name: str = name
        self.interval: float = interval
        self._callback: Callable[[], object] | Callable[[], Awaitable[object]] = callback
        self._wait_first: bool = wait_first
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        """Check whether the routine task is alive."""
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the routine on the running event loop. Starting twice is a no-op."""
        if self.is_running:
            logger.debug("Routine '%s' is already running", self.name)
            return
        self._task = asyncio.create_task(self._run(), name=self.name)
        logger.debug("Routine '%s' started (interval: %.1f sec)", self.name, self.interval)

    async def cancel(self) -> None:
        """Cancel the routine and wait for it to finish."""
        if self._task is None:
            return
        task: asyncio.Task[None] = self._task
        self._task = None
        if not task.done():
            task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Routine '%s' cancelled", self.name)

    async def run_once(self) -> None:
        """Invoke the callback a single time, logging instead of raising on failure."""
        try:
            outcome: object = self._callback()
            if inspect.isawaitable(outcome):
                await outcome
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Routine '%s' raised an exception", self.name)

    async def _run(self) -> None:
        if not self._wait_first:
            await self.run_once()
        while True:
            await asyncio.sleep(self.interval)
            await self.run_once()
