# almanac/ticker.py
"""
Asynchronous ticker for world updates.
Systems subscribe callback coroutines that are awaited on each tick with the
real seconds elapsed since the previous tick.
"""
import asyncio
import inspect
import logging
import time
from typing import Callable, Coroutine, Any, List, Optional

log = logging.getLogger(__name__)

# Callbacks receive the delta time (dt) since the last tick as a float.
TickCallback = Callable[[float], Coroutine[Any, Any, None]]


class Ticker:
    def __init__(self, interval_seconds: float = 1.0):
        self.interval_seconds = interval_seconds
        self._callbacks: List[TickCallback] = []
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def subscribe(self, callback: TickCallback):
        """Subscribe an async function to be called on each ticker cycle."""
        if not inspect.iscoroutinefunction(callback):
            log.error("Ticker subscription failed: %s is not an async function.", getattr(callback, '__name__', callback))
            return
        if callback not in self._callbacks:
            self._callbacks.append(callback)
        log.debug("Callback %s subscribed to ticker.", callback.__name__)

    def unsubscribe(self, callback: TickCallback):
        if callback in self._callbacks:
            self._callbacks.remove(callback)
        log.debug("Callback %s unsubscribed from ticker.", getattr(callback, '__name__', callback))

    def start(self):
        """Starts the ticker task if not already running."""
        if self.running:
            log.warning("Ticker task is already running.")
            return
        if self.interval_seconds <= 0:
            log.error("Ticker interval must be positive. Ticker not started.")
            return
        log.info("Starting ticker with interval: %.2f seconds.", self.interval_seconds)
        self._task = asyncio.create_task(self._run(), name="EnvironmentTicker")

    async def stop(self):
        """Stops the ticker task gracefully."""
        if not self.running:
            self._task = None
            return
        log.info("Stopping ticker...")
        self._task.cancel()
        try:
            await asyncio.wait_for(self._task, timeout=5.0)
        except asyncio.CancelledError:
            log.info("Ticker task successfully cancelled.")
        except asyncio.TimeoutError:
            log.warning("Ticker task did not finish cancelling within timeout.")
        finally:
            self._task = None

    async def tick(self, delta_time: float):
        """Runs every callback once. Exceptions are logged per callback and never stop the tick."""
        callbacks = list(self._callbacks)
        if not callbacks:
            return
        results = await asyncio.gather(*(cb(delta_time) for cb in callbacks), return_exceptions=True)
        for callback, result in zip(callbacks, results):
            if isinstance(result, Exception):
                log.error("Ticker: Exception in callback '%s': %s",
                          getattr(callback, '__name__', 'unknown callback'), result, exc_info=result)

    async def _run(self):
        last_tick_time = time.monotonic()
        while True:
            try:
                await asyncio.sleep(self.interval_seconds)
                current_time = time.monotonic()
                delta_time = current_time - last_tick_time
                last_tick_time = current_time
                await self.tick(delta_time)
            except asyncio.CancelledError:
                log.info("Ticker loop cancelled.")
                raise
            except Exception:
                log.exception("Ticker loop encountered unexpected error:")
                await asyncio.sleep(max(5.0, self.interval_seconds))
