# src/ca_helper/routing/refresh.py

from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
import threading
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class RefreshThrottle:
    """
    Last-accepted-timestamp guard.

    try_acquire() accepts a refresh only if at least `min_interval_seconds`
    passed since the previously accepted one; rejected calls are coalesced.
    """

    def __init__(self, min_interval_seconds: float = 0.5, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._min_interval = max(0.0, float(min_interval_seconds))
        self._clock = clock
        self._last: float | None = None
        self._lock = threading.Lock()

    def try_acquire(self) -> bool:
        with self._lock:
            now = self._clock()
            if self._last is not None and now - self._last < self._min_interval:
                return False
            self._last = now
            return True

    def reset(self) -> None:
        with self._lock:
            self._last = None


async def run_auto_refresh(
    refresh: Callable[[], None | Awaitable[None]],
    *,
    interval_minutes: float,
    interval_seconds: float | None = None,
) -> None:
    """
    Call `refresh` periodically.

    Returns immediately when the interval is not positive. A failing refresh is
    logged and the loop keeps going. To stop, cancel the coroutine/task.
    `interval_seconds` overrides the minute value (used by tests).
    """
    period = float(interval_seconds) if interval_seconds is not None else float(interval_minutes) * 60.0
    if period <= 0:
        logger.info("Auto-refresh disabled")
        return

    logger.info("Auto-refresh every %.1fs", period)
    while True:
        await asyncio.sleep(period)
        try:
            result = refresh()
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Auto-refresh failed")


@dataclass
class AutoRefreshRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    task: asyncio.Task[None]

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.task.cancel)
        except RuntimeError:
            logger.debug("Auto-refresh loop already closed.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_auto_refresh_in_background(
    refresh: Callable[[], None],
    *,
    interval_minutes: float,
    interval_seconds: float | None = None,
) -> AutoRefreshRunner | None:
    """
    Run run_auto_refresh() on its own event loop in a daemon thread.

    The console REPL blocks on input(), so the periodic refresh cannot share its thread.
    Returns None when auto-refresh is disabled.
    """
    period = float(interval_seconds) if interval_seconds is not None else float(interval_minutes) * 60.0
    if period <= 0:
        logger.info("Auto-refresh disabled, not starting.")
        return None

    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        task = loop.create_task(
            run_auto_refresh(refresh, interval_minutes=interval_minutes, interval_seconds=interval_seconds)
        )
        holder["loop"] = loop
        holder["task"] = task
        ready.set()

        try:
            loop.run_until_complete(task)
        except asyncio.CancelledError:
            logger.info("Auto-refresh stopped.")
        finally:
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name="AutoRefresh", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    task = holder.get("task")
    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(task, asyncio.Task):
        logger.error("Auto-refresh thread did not initialize properly.")
        return None

    logger.info("Auto-refresh background thread started.")
    return AutoRefreshRunner(thread=t, loop=loop, task=task)
