"""
In-Memory Store Implementation

Provides a Store implementation keeping sessions in a dict keyed by session id,
with a background sweeper that evicts sessions idle for longer than their
own timeout.

Design notes:
- A single ReadWriteLock guards the dict. Lookups share it, while insertion,
  removal and eviction take it exclusively.
- Lookups refresh the session's access time (sliding timeout); callers never
  call Session.access() themselves.
- Each sweep first scans under the read lock and only takes the write lock
  when something has expired. The scan is repeated under the write lock,
  since a concurrent get() may have refreshed a session in between. Both
  scans use the same ``now``.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

import psutil

from .base_store import Store
from .exceptions import StoreClosedError
from .rwlock import ReadWriteLock
from .session import Session
from .storage_types import StoreStats
from .sweeper import SessionSweeper
from .system_utils import log_system_status

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL_SECONDS = 10.0

# Pass as InMemoryStoreOptions.logger to silence session lifecycle logging
NOOP_LOGGER = logging.getLogger("httpsession.noop")
NOOP_LOGGER.addHandler(logging.NullHandler())
NOOP_LOGGER.propagate = False
NOOP_LOGGER.disabled = True


@dataclass
class InMemoryStoreOptions:
    """Options for InMemoryStore. ``None`` or zero fields use the defaults."""

    sweep_interval_seconds: float | None = None
    # Logger for session lifecycle events (added, removed, timed out)
    logger: logging.Logger | None = None


class InMemoryStore(Store):
    """In-memory Store with timeout-based eviction."""

    def __init__(self, options: InMemoryStoreOptions | None = None) -> None:
        options = options or InMemoryStoreOptions()

        interval = options.sweep_interval_seconds
        if not interval:
            interval = DEFAULT_SWEEP_INTERVAL_SECONDS
        if interval < 0:
            raise ValueError("sweep_interval_seconds must not be negative")

        self._sessions: dict[str, Session] = {}
        self._lock = ReadWriteLock()
        self._log = options.logger or logger
        self._closed = False
        self._close_lock = threading.Lock()

        self._sweeper = SessionSweeper(
            self.sweep, interval, name=f"{self.__class__.__name__}-sweeper"
        )
        self._sweeper.start()

    def __len__(self) -> int:
        with self._lock.read_lock():
            return len(self._sessions)

    @property
    def sweep_interval_seconds(self) -> float:
        return self._sweeper.interval_seconds

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise StoreClosedError("store is closed")

    # Store interface
    def get(self, session_id: str) -> Optional[Session]:
        self._check_open()
        with self._lock.read_lock():
            session = self._sessions.get(session_id)
            if session is None:
                return None
            session.access()
            return session

    def add(self, session: Session) -> None:
        self._check_open()
        with self._lock.write_lock():
            self._log.info("Session added: %s", session.id)
            self._sessions[session.id] = session

    def remove(self, session: Session) -> None:
        self._check_open()
        with self._lock.write_lock():
            self._log.info("Session removed: %s", session.id)
            self._sessions.pop(session.id, None)

    def close(self) -> None:
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        self._sweeper.stop()

    def sweep(self, now: float) -> list[str]:
        """Evict every session idle for longer than its timeout at ``now``.

        Returns the ids of the evicted sessions.
        """
        with self._lock.read_lock():
            need_remove = any(s.is_expired(now) for s in self._sessions.values())
        if not need_remove:
            return []

        evicted: list[str] = []
        with self._lock.write_lock():
            for session_id, session in list(self._sessions.items()):
                if session.is_expired(now):
                    self._log.info("Session timed out: %s", session_id)
                    del self._sessions[session_id]
                    evicted.append(session_id)
            remaining = len(self._sessions)

        if evicted:
            log_system_status(self.__class__.__name__, remaining, len(evicted))
        return evicted

    def get_storage_stats(self) -> StoreStats:
        """Get store statistics."""
        with self._lock.read_lock():
            total_sessions = len(self._sessions)
        return StoreStats(
            total_sessions=total_sessions,
            memory_usage_percent=psutil.virtual_memory().percent,
        )
