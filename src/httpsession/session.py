"""
Session Entity

A Session is the server-side half of an HTTP session: an unguessable id that
is round-tripped to the client, creation and last-access timestamps, and two
attribute namespaces.

Design notes:
- Constant attributes are copied in at construction and never written again,
  so they are read without locking.
- Variable attributes and the last-access time are guarded by a per-session
  ReadWriteLock, independent of any store lock.
- Setting an attribute to ``None`` deletes it; explicit ``None`` values are
  never stored.
"""

from __future__ import annotations

import base64
import copy
import secrets
import time
from dataclasses import dataclass
from typing import Any

from .rwlock import ReadWriteLock

DEFAULT_TIMEOUT_SECONDS = 30 * 60  # 30 minutes
DEFAULT_ID_BYTE_LENGTH = 18  # 24 chars once base64 encoded


def generate_session_id(byte_length: int = DEFAULT_ID_BYTE_LENGTH) -> str:
    """Return a URL-safe base64 encoded id built from ``byte_length`` random bytes.

    Uses the operating system CSPRNG. Errors from the random source propagate;
    there is no fallback to a weaker generator.
    """
    if byte_length <= 0:
        raise ValueError("byte_length must be a positive integer")
    return base64.urlsafe_b64encode(secrets.token_bytes(byte_length)).decode("ascii")


@dataclass
class SessionOptions:
    """Options for creating a Session. ``None`` or zero fields use the defaults."""

    constant_attrs: dict[str, Any] | None = None
    attrs: dict[str, Any] | None = None
    timeout_seconds: float | None = None
    id_byte_length: int | None = None


class Session:
    """Server-side session state identified by a random id."""

    def __init__(self, options: SessionOptions | None = None) -> None:
        options = options or SessionOptions()

        timeout = options.timeout_seconds
        if not timeout:
            timeout = DEFAULT_TIMEOUT_SECONDS
        if timeout < 0:
            raise ValueError("timeout_seconds must not be negative")

        id_byte_length = options.id_byte_length
        if id_byte_length is None or id_byte_length <= 0:
            id_byte_length = DEFAULT_ID_BYTE_LENGTH

        # Generate the id first so a random source failure leaves nothing behind
        self._id = generate_session_id(id_byte_length)
        now = time.time()
        self._created = now
        self._accessed = now
        self._timeout = float(timeout)
        self._constant_attrs: dict[str, Any] = copy.deepcopy(
            dict(options.constant_attrs or {})
        )
        self._attrs: dict[str, Any] = {
            name: value
            for name, value in copy.deepcopy(dict(options.attrs or {})).items()
            if value is not None
        }
        self._lock = ReadWriteLock()

    def __repr__(self) -> str:
        return f"Session(id={self._id!r}, timeout={self._timeout!r})"

    @property
    def id(self) -> str:
        return self._id

    def is_new(self) -> bool:
        """True if the session has not been accessed since it was created."""
        with self._lock.read_lock():
            return self._created == self._accessed

    def constant_attr(self, name: str) -> Any:
        """Return a constant attribute, or None if it was not provided."""
        return self._constant_attrs.get(name)

    def attr(self, name: str) -> Any:
        """Return a variable attribute, or None if it is not set."""
        with self._lock.read_lock():
            return self._attrs.get(name)

    def set_attr(self, name: str, value: Any) -> None:
        """Set a variable attribute. Passing None removes the attribute."""
        with self._lock.write_lock():
            if value is None:
                self._attrs.pop(name, None)
            else:
                self._attrs[name] = value

    def attrs(self) -> dict[str, Any]:
        """Return a copy of all variable attributes."""
        with self._lock.read_lock():
            return dict(self._attrs)

    @property
    def created(self) -> float:
        return self._created

    @property
    def accessed(self) -> float:
        with self._lock.read_lock():
            return self._accessed

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def mutex(self) -> ReadWriteLock:
        """The lock guarding this session's mutable state.

        Hold ``mutex.write_lock()`` to make several attribute operations
        atomic; the attribute methods may be called inside the block.
        """
        return self._lock

    def access(self) -> None:
        """Register an access, moving the last-access time to now.

        Stores call this on every successful lookup; callers normally do not.
        """
        now = time.time()
        with self._lock.write_lock():
            # Keep accessed >= created and monotonic even if the wall clock steps back
            if now > self._accessed:
                self._accessed = now
            else:
                self._accessed = self._accessed + 1e-6

    def is_expired(self, now: float) -> bool:
        """True if the session has been idle for longer than its timeout at ``now``."""
        return now - self.accessed > self._timeout
