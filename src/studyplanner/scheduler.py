"""Tick sources for the countdown timer.

A scheduler delivers one callback per elapsed second for every live handle
until that handle is cancelled.
"""

import itertools
import logging
import threading
import time
from typing import Callable, Hashable, Protocol

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class Scheduler(Protocol):
    def schedule_tick(self, callback: TickCallback) -> Hashable: ...

    def cancel(self, handle: Hashable) -> None: ...


class _TickThread:
    """One recurring tick source running on a daemon thread."""

    def __init__(self, callback: TickCallback, interval: float):
        self._callback = callback
        self._interval = interval
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._stopped.set()

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def _run(self) -> None:
        next_at = time.monotonic() + self._interval
        while not self._stopped.wait(max(0.0, next_at - time.monotonic())):
            try:
                self._callback()
            except Exception:
                logger.exception("Error in tick callback")
            next_at += self._interval


class ThreadingScheduler:
    """Wall-clock scheduler backed by one thread per tick source."""

    def __init__(self, interval: float = 1.0):
        self._interval = interval
        self._ticks: dict[int, _TickThread] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def schedule_tick(self, callback: TickCallback) -> int:
        tick = _TickThread(callback, self._interval)
        with self._lock:
            handle = next(self._ids)
            self._ticks[handle] = tick
        tick.start()
        return handle

    def cancel(self, handle: Hashable) -> None:
        with self._lock:
            tick = self._ticks.pop(handle, None)
        if tick:
            tick.stop()

    def shutdown(self, timeout: float = 1.0) -> None:
        """Stop every tick source and wait for its thread to exit.

        Must not be called while holding a lock a tick callback needs.
        """
        with self._lock:
            ticks = list(self._ticks.values())
            self._ticks.clear()
        for tick in ticks:
            tick.stop()
        for tick in ticks:
            tick.join(timeout)
        logger.debug("Scheduler shut down, %d tick source(s) stopped", len(ticks))


class ManualScheduler:
    """Deterministic scheduler driven by advance() instead of wall-clock time."""

    def __init__(self) -> None:
        self._callbacks: dict[int, TickCallback] = {}
        self._ids = itertools.count(1)
        self.elapsed_seconds = 0

    @property
    def active_count(self) -> int:
        return len(self._callbacks)

    def schedule_tick(self, callback: TickCallback) -> int:
        handle = next(self._ids)
        self._callbacks[handle] = callback
        return handle

    def cancel(self, handle: Hashable) -> None:
        self._callbacks.pop(handle, None)  # type: ignore[arg-type]

    def advance(self, seconds: int = 1) -> None:
        """Simulate the passage of whole seconds."""
        for _ in range(seconds):
            self.elapsed_seconds += 1
            for handle in list(self._callbacks):
                # Cancelled by an earlier callback during this second
                callback = self._callbacks.get(handle)
                if callback is not None:
                    callback()
