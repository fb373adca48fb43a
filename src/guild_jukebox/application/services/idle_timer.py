"""Single-shot, cancellable inactivity timer."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class IdleTimer:
    """Runs ``on_fire`` once after ``delay`` seconds unless disarmed first.

    At most one countdown is live: arming again cancels the previous one and
    starts over.
    """

    def __init__(
        self, delay: float, on_fire: Callable[[], Awaitable[None]], *, name: str = "idle-timer"
    ) -> None:
        self._delay = delay
        self._on_fire = on_fire
        self._name = name
        self._task: asyncio.Task[None] | None = None

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def armed(self) -> bool:
        return self._task is not None and not self._task.done()

    def arm(self) -> None:
        self.disarm()
        self._task = asyncio.get_running_loop().create_task(self._countdown(), name=self._name)

    def disarm(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    async def _countdown(self) -> None:
        try:
            await asyncio.sleep(self._delay)
        except asyncio.CancelledError:
            return

        # Detach before firing so the callback may disarm or re-arm freely.
        self._task = None
        try:
            await self._on_fire()
        except Exception:
            logger.exception("Error in %s callback", self._name)
