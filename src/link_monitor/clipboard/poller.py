"""Fixed-period clipboard polling on the asyncio event loop."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from link_monitor.config import POLL_INTERVAL

logger = logging.getLogger(__name__)


class ClipboardPoller:
    """Runs ``callback`` every ``interval`` seconds until stopped.

    Each tick is awaited before the next sleep starts, so ticks never overlap.
    An exception from a tick is logged and the timer keeps going.
    """

    def __init__(self, callback: Callable[[], Awaitable[object]], interval: float = POLL_INTERVAL):
        self.callback = callback
        self.interval = interval
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info(f"Clipboard polling started (every {self.interval}s)")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Clipboard polling stopped")

    async def _run(self) -> None:
        while True:
            try:
                await self.callback()
            except Exception:
                logger.exception("Clipboard poll failed")
            await asyncio.sleep(self.interval)
