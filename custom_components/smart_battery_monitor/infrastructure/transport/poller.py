# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""Periodic status poller bound to one connection."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

_LOGGER = logging.getLogger(__name__)

TickCallback = Callable[[], Awaitable[None]]


class Poller:
    """Cancellable periodic task calling ``on_tick`` every ``interval`` seconds.

    The first tick fires one full interval after start(). Tick failures are
    logged and do not stop the poller; only cancel() does.

    Example:
        >>> poller = Poller(2.0, manager.poll_tick)
        >>> poller.start()
        >>> ...
        >>> await poller.cancel()
    """

    def __init__(self, interval: float, on_tick: TickCallback, name: str = "poller"):
        """Initialize poller.

        Args:
            interval: Seconds between ticks (> 0)
            on_tick: Coroutine function called on every tick
            name: Task name for debugging
        """
        if interval <= 0:
            raise ValueError(f"Poll interval must be > 0, got {interval}")
        self._interval = interval
        self._on_tick = on_tick
        self._name = name
        self._task: Optional[asyncio.Task] = None
        self._ticks = 0

    @property
    def interval(self) -> float:
        """Seconds between ticks."""
        return self._interval

    @property
    def is_running(self) -> bool:
        """True while the periodic task is alive."""
        return self._task is not None and not self._task.done()

    @property
    def ticks(self) -> int:
        """Number of ticks fired so far."""
        return self._ticks

    def start(self) -> None:
        """Start ticking.

        Raises:
            RuntimeError: If already running
        """
        if self.is_running:
            raise RuntimeError(f"{self._name} already running")
        self._task = asyncio.create_task(self._run(), name=self._name)
        _LOGGER.debug("%s started (interval %.1fs)", self._name, self._interval)

    async def cancel(self) -> None:
        """Stop ticking and wait for the task to finish. Idempotent."""
        task, self._task = self._task, None
        if task is None:
            return
        if task is asyncio.current_task():
            task.cancel()
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        _LOGGER.debug("%s stopped after %d ticks", self._name, self._ticks)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self._ticks += 1
            try:
                await self._on_tick()
            except asyncio.CancelledError:
                raise
            except Exception as err:
                _LOGGER.warning("%s tick failed: %s", self._name, err)
