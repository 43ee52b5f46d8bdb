"""Fixed interval tick loop that only runs while players are connected."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional


class TickScheduler:
    """Start/stop controller around a repeating asyncio task.

    ``on_tick`` is awaited once per interval. A tick that takes longer than
    the interval delays the next one instead of piling them up, so clients
    always see whole ticks in order.
    """

    def __init__(
        self,
        interval: float,
        on_tick: Callable[[], Awaitable[None]],
        on_error: Optional[Callable[[BaseException], None]] = None,
    ) -> None:
        self.interval = interval
        self._on_tick = on_tick
        self._on_error = on_error
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        logging.info("Starting tick loop (%.0f ms)", self.interval * 1000)
        self._task = asyncio.create_task(self._run())

    def stop(self) -> None:
        if self._task is None:
            return
        if not self._task.done():
            logging.info("Stopping tick loop")
            self._task.cancel()
        self._task = None

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time() + self.interval
        while True:
            await asyncio.sleep(max(0.0, next_tick - loop.time()))
            try:
                await self._on_tick()
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                logging.exception("Tick loop crashed")
                if self._on_error is not None:
                    self._on_error(exc)
                return
            next_tick += self.interval
            now = loop.time()
            if next_tick < now:
                next_tick = now + self.interval
