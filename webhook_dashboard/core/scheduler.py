"""Cancellable timers built on asyncio tasks."""
import asyncio
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class ScheduledTask:
    """Runs a callback once after a delay unless cancelled first.

    Once cancel() returns the callback is guaranteed not to run, even if
    the delay has already elapsed and the task is waiting to be resumed.
    """

    def __init__(self, delay: float, callback: Callable[[], None], name: str = "scheduled"):
        self.delay = delay
        self.name = name
        self._callback = callback
        self._cancelled = False
        self._fired = False
        self._task = asyncio.get_running_loop().create_task(self._run(), name=name)

    @property
    def pending(self) -> bool:
        """True until the callback has run or the task was cancelled."""
        return not (self._fired or self._cancelled)

    async def _run(self) -> None:
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            return
        self._fire()

    def _fire(self) -> None:
        if not self.pending:
            return
        self._fired = True
        self._callback()

    def cancel(self) -> None:
        """Cancel the timer. Safe to call more than once."""
        if self._cancelled:
            return
        self._cancelled = True
        self._task.cancel()
        logger.debug(f"Cancelled {self.name} timer")

    def fire_now(self) -> None:
        """Run the callback immediately instead of waiting for the delay."""
        if not self.pending:
            return
        self._task.cancel()
        self._fire()

    async def wait(self) -> None:
        """Wait for the underlying task to finish."""
        await asyncio.gather(self._task, return_exceptions=True)


class PeriodicTask:
    """Runs a callback every `interval` seconds until cancelled.

    The first call happens one full interval after creation.
    """

    def __init__(self, interval: float, callback: Callable[[], None], name: str = "periodic"):
        self.interval = interval
        self.name = name
        self._callback = callback
        self._cancelled = False
        self._task = asyncio.get_running_loop().create_task(self._run(), name=name)

    @property
    def running(self) -> bool:
        return not self._cancelled and not self._task.done()

    async def _run(self) -> None:
        while not self._cancelled:
            try:
                await asyncio.sleep(self.interval)
            except asyncio.CancelledError:
                return

            if self._cancelled:
                return

            try:
                self._callback()
            except Exception as e:
                logger.error(f"Error in {self.name} callback: {e}")

    def cancel(self) -> None:
        """Stop the timer. Safe to call more than once."""
        if self._cancelled:
            return
        self._cancelled = True
        self._task.cancel()
        logger.debug(f"Cancelled {self.name} timer")

    async def wait(self) -> None:
        """Wait for the underlying task to finish."""
        await asyncio.gather(self._task, return_exceptions=True)
