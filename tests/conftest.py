"""Shared pytest fixtures for session tests."""

import pytest

from httpsession import global_manager
from httpsession.in_memory_store import NOOP_LOGGER, InMemoryStore, InMemoryStoreOptions


@pytest.fixture
def store():
    """A fresh in-memory store with a fast sweeper and quiet logging."""
    st = InMemoryStore(
        InMemoryStoreOptions(sweep_interval_seconds=0.01, logger=NOOP_LOGGER)
    )
    yield st
    st.close()


@pytest.fixture
def reset_default_manager():
    """Make sure no default manager leaks between tests."""
    global_manager.set_default_manager(None)
    yield
    global_manager.set_default_manager(None)
