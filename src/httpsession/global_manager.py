"""
Default Manager

A process-wide default Manager and delegating functions, for applications
that do not want to pass a manager around.

The default is built lazily on first use as a CookieManager over an
InMemoryStore, configured from the environment (see settings.load_settings).
Replace it with set_default_manager(), which closes the previous default.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from starlette.requests import HTTPConnection
from starlette.responses import Response

from .base_manager import Manager
from .cookie_manager import CookieManager
from .in_memory_store import InMemoryStore
from .session import Session
from .settings import load_settings

logger = logging.getLogger(__name__)

_default_manager: Manager | None = None
_lock = threading.Lock()


def _build_default_manager() -> Manager:
    settings = load_settings()
    store = InMemoryStore(settings.store_options())
    logger.debug("Built default session manager")
    return CookieManager(store, settings.manager_options())


def get_default_manager() -> Manager:
    """Return the default manager, building it on first use."""
    global _default_manager
    with _lock:
        if _default_manager is None:
            _default_manager = _build_default_manager()
        return _default_manager


def set_default_manager(manager: Manager | None) -> None:
    """Replace the default manager, closing the previous one if it was built.

    Passing None resets it; the next use builds a fresh default.
    """
    global _default_manager
    with _lock:
        previous = _default_manager
        _default_manager = manager
    if previous is not None and previous is not manager:
        previous.close()


def get(request: HTTPConnection) -> Optional[Session]:
    """Delegate to the default manager's get()."""
    return get_default_manager().get(request)


def add(session: Session, response: Response) -> None:
    """Delegate to the default manager's add()."""
    get_default_manager().add(session, response)


def remove(session: Session, response: Response) -> None:
    """Delegate to the default manager's remove()."""
    get_default_manager().remove(session, response)


def close() -> None:
    """Close the default manager; a later use builds a new one."""
    set_default_manager(None)
