"""Exceptions raised by the session package."""


class SessionError(Exception):
    """Base class for all session errors."""


class StoreClosedError(SessionError):
    """Raised when a store is used after it has been closed."""
