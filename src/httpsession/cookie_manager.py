"""
Cookie Manager Implementation

A secure, cookie based Manager. Only the session id travels to the client,
in an HttpOnly cookie which by default is restricted to HTTPS.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from starlette.requests import HTTPConnection
from starlette.responses import Response

from .base_manager import Manager
from .base_store import Store
from .session import Session
from .utils.session_utils import normalize_session_id

DEFAULT_COOKIE_NAME = "sessid"
DEFAULT_COOKIE_MAX_AGE_SECONDS = 30 * 24 * 60 * 60  # 30 days
DEFAULT_COOKIE_PATH = "/"


@dataclass
class CookieManagerOptions:
    """Options for CookieManager. Empty fields use the defaults."""

    cookie_name: str | None = None
    # Allow the session id cookie over plain HTTP too (default: HTTPS only)
    allow_insecure_transport: bool = False
    max_age_seconds: float | None = None
    path: str | None = None


class CookieManager(Manager):
    """Manager carrying the session id in a cookie."""

    def __init__(self, store: Store, options: CookieManagerOptions | None = None) -> None:
        options = options or CookieManagerOptions()
        self._store = store
        self._cookie_name = options.cookie_name or DEFAULT_COOKIE_NAME
        self._cookie_secure = not options.allow_insecure_transport
        max_age = options.max_age_seconds
        if not max_age:
            self._cookie_max_age = DEFAULT_COOKIE_MAX_AGE_SECONDS
        elif max_age < 0:
            raise ValueError("max_age_seconds must not be negative")
        else:
            # Max-Age=0 would delete the cookie being set
            self._cookie_max_age = max(1, int(max_age))
        self._cookie_path = options.path or DEFAULT_COOKIE_PATH

    @property
    def store(self) -> Store:
        return self._store

    @property
    def cookie_name(self) -> str:
        return self._cookie_name

    @property
    def cookie_secure(self) -> bool:
        return self._cookie_secure

    @property
    def cookie_max_age_seconds(self) -> int:
        return self._cookie_max_age

    @property
    def cookie_path(self) -> str:
        return self._cookie_path

    def get(self, request: HTTPConnection) -> Optional[Session]:
        session_id = normalize_session_id(request.cookies.get(self._cookie_name))
        if session_id is None:
            return None
        return self._store.get(session_id)

    def add(self, session: Session, response: Response) -> None:
        # HttpOnly keeps the id away from page scripts
        response.set_cookie(
            self._cookie_name,
            session.id,
            max_age=self._cookie_max_age,
            path=self._cookie_path,
            secure=self._cookie_secure,
            httponly=True,
        )
        self._store.add(session)

    def remove(self, session: Session, response: Response) -> None:
        # Empty value, Max-Age=0 and a past Expires
        response.delete_cookie(
            self._cookie_name,
            path=self._cookie_path,
            secure=self._cookie_secure,
            httponly=True,
        )
        self._store.remove(session)

    def close(self) -> None:
        self._store.close()
