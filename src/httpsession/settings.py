"""
Environment Configuration

Settings for the lazily-built default manager, read from ``HTTPSESSION_*``
environment variables. Unparseable or non-positive numbers fall back to the
defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from .cookie_manager import (
    DEFAULT_COOKIE_MAX_AGE_SECONDS,
    DEFAULT_COOKIE_NAME,
    DEFAULT_COOKIE_PATH,
    CookieManagerOptions,
)
from .in_memory_store import DEFAULT_SWEEP_INTERVAL_SECONDS, InMemoryStoreOptions

_TRUE_VALUES = {"1", "true", "yes"}


@dataclass
class Settings:
    sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS
    cookie_name: str = DEFAULT_COOKIE_NAME
    allow_insecure_transport: bool = False
    cookie_max_age_seconds: float = DEFAULT_COOKIE_MAX_AGE_SECONDS
    cookie_path: str = DEFAULT_COOKIE_PATH

    def store_options(self) -> InMemoryStoreOptions:
        return InMemoryStoreOptions(sweep_interval_seconds=self.sweep_interval_seconds)

    def manager_options(self) -> CookieManagerOptions:
        return CookieManagerOptions(
            cookie_name=self.cookie_name,
            allow_insecure_transport=self.allow_insecure_transport,
            max_age_seconds=self.cookie_max_age_seconds,
            path=self.cookie_path,
        )


def _positive_float(environ: Mapping[str, str], key: str, default: float) -> float:
    raw = environ.get(key)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from the environment (``os.environ`` by default)."""
    if environ is None:
        environ = os.environ
    return Settings(
        sweep_interval_seconds=_positive_float(
            environ, "HTTPSESSION_SWEEP_INTERVAL", DEFAULT_SWEEP_INTERVAL_SECONDS
        ),
        cookie_name=environ.get("HTTPSESSION_COOKIE_NAME") or DEFAULT_COOKIE_NAME,
        allow_insecure_transport=environ.get(
            "HTTPSESSION_ALLOW_INSECURE", "false"
        ).lower()
        in _TRUE_VALUES,
        cookie_max_age_seconds=_positive_float(
            environ, "HTTPSESSION_COOKIE_MAX_AGE", DEFAULT_COOKIE_MAX_AGE_SECONDS
        ),
        cookie_path=environ.get("HTTPSESSION_COOKIE_PATH") or DEFAULT_COOKIE_PATH,
    )
