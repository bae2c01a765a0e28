from importlib.metadata import version, PackageNotFoundError

from .base_manager import Manager
from .base_store import Store
from .cookie_manager import CookieManager, CookieManagerOptions
from .exceptions import SessionError, StoreClosedError
from .global_manager import get_default_manager, set_default_manager
from .in_memory_store import NOOP_LOGGER, InMemoryStore, InMemoryStoreOptions
from .session import Session, SessionOptions, generate_session_id

# Package metadata helpers
try:
    __version__ = version("httpsession")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0+dev"

# Public API
__all__ = [
    "Session",
    "SessionOptions",
    "generate_session_id",
    "Store",
    "InMemoryStore",
    "InMemoryStoreOptions",
    "NOOP_LOGGER",
    "Manager",
    "CookieManager",
    "CookieManagerOptions",
    "get_default_manager",
    "set_default_manager",
    "SessionError",
    "StoreClosedError",
    "__version__",
]
