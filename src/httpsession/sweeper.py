"""
Expiration Sweeper

Runs a store's eviction pass on a fixed interval in a daemon thread.

Design notes:
- The wait between ticks is ``Event.wait(interval)``, so ``stop()`` wakes the
  thread immediately instead of waiting out the interval.
- A stop request is never followed by a final sweep.
- ``stop()`` joins the thread; a tick already in progress finishes first.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

logger = logging.getLogger(__name__)


class SessionSweeper:
    """Cancellable periodic task calling ``sweep(now)`` every ``interval_seconds``."""

    def __init__(
        self,
        sweep: Callable[[float], object],
        interval_seconds: float,
        name: str = "session-sweeper",
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._sweep = sweep
        self._interval = float(interval_seconds)
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._started = False
        self._lock = threading.Lock()

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._thread.is_alive()

    def start(self) -> None:
        with self._lock:
            if self._started:
                return
            self._started = True
            self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        """Signal the sweeper to stop and wait for its thread to exit."""
        self._stop_event.set()
        with self._lock:
            started = self._started
        if started and threading.current_thread() is not self._thread:
            self._thread.join(timeout)

    def _run(self) -> None:
        logger.debug("Sweeper started (interval=%.3fs)", self._interval)
        # wait() returns True once stop() was called
        while not self._stop_event.wait(self._interval):
            now = time.time()
            try:
                self._sweep(now)
            except Exception:
                logger.exception("Session sweep failed")
        logger.debug("Sweeper stopped")
