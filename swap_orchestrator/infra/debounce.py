"""
Single-slot debounce scheduler

Each call to schedule() replaces whatever is pending: the previous task is
cancelled and a new one waits out the full delay before running. Only the
last call made before the caller goes quiet actually executes.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Replace-on-write delayed task

    Usage:
        debouncer = Debouncer(0.5)
        debouncer.schedule(refresh_quote)   # cancelled by the next line
        debouncer.schedule(refresh_quote)   # runs 0.5s from now
        await debouncer.cancel()            # on teardown
    """

    def __init__(self, delay: float):
        self._delay = delay
        self._task: Optional[asyncio.Task] = None

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def task(self) -> Optional[asyncio.Task]:
        """The currently scheduled task, if any"""
        return self._task

    def schedule(self, callback: Callable[[], Awaitable[None]]) -> asyncio.Task:
        """Cancel any pending run and schedule callback after the delay"""
        if self.pending:
            self._task.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run(callback))
        return self._task

    async def _run(self, callback: Callable[[], Awaitable[None]]) -> None:
        await asyncio.sleep(self._delay)
        await callback()

    async def flush(self) -> None:
        """Wait for the pending run, if any, to finish"""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    async def cancel(self) -> None:
        """Cancel the pending run and wait for it to unwind"""
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            logger.debug("Pending debounced call cancelled")
