"""Unit tests for InMemoryStore."""

import logging
import threading
import time
from unittest.mock import MagicMock, patch

import pytest

from httpsession.base_store import Store
from httpsession.exceptions import StoreClosedError
from httpsession.in_memory_store import (
    DEFAULT_SWEEP_INTERVAL_SECONDS,
    NOOP_LOGGER,
    InMemoryStore,
    InMemoryStoreOptions,
)
from httpsession.session import Session, SessionOptions


@pytest.fixture
def idle_store():
    """A store whose background sweeper never fires during a test."""
    st = InMemoryStore(
        InMemoryStoreOptions(sweep_interval_seconds=3600, logger=NOOP_LOGGER)
    )
    yield st
    st.close()


class TestInMemoryStoreBasics:
    def test_is_a_store(self, store):
        assert isinstance(store, Store)

    def test_default_interval(self):
        with InMemoryStore() as st:
            assert st.sweep_interval_seconds == DEFAULT_SWEEP_INTERVAL_SECONDS

    def test_zero_interval_uses_default(self):
        with InMemoryStore(InMemoryStoreOptions(sweep_interval_seconds=0)) as st:
            assert st.sweep_interval_seconds == DEFAULT_SWEEP_INTERVAL_SECONDS

    def test_negative_interval_rejected(self):
        with pytest.raises(ValueError):
            InMemoryStore(InMemoryStoreOptions(sweep_interval_seconds=-1))

    def test_get_unknown_returns_none(self, store):
        assert store.get("asdf") is None

    def test_add_get_round_trip(self, store):
        s = Session()
        store.add(s)
        time.sleep(0.01)
        assert store.get(s.id) is s
        assert s.accessed > s.created
        assert not s.is_new()

    def test_remove(self, store):
        s = Session()
        store.add(s)
        store.remove(s)
        assert store.get(s.id) is None
        # Idempotent
        store.remove(s)
        assert len(store) == 0

    def test_add_overwrites_same_id(self, idle_store):
        s = Session()
        idle_store.add(s)
        idle_store.add(s)
        assert len(idle_store) == 1

    def test_every_session_is_reachable_by_its_id(self, idle_store):
        sessions = [Session() for _ in range(20)]
        for s in sessions:
            idle_store.add(s)
        for s in sessions:
            assert idle_store.get(s.id).id == s.id


class TestInMemoryStoreExpiration:
    def test_session_expires_after_timeout(self):
        with InMemoryStore(
            InMemoryStoreOptions(sweep_interval_seconds=0.02, logger=NOOP_LOGGER)
        ) as st:
            s = Session(SessionOptions(timeout_seconds=0.2))
            st.add(s)
            assert st.get(s.id) is s

            time.sleep(0.1)
            assert st.get(s.id) is s

            time.sleep(0.35)
            assert st.get(s.id) is None

    def test_get_keeps_session_alive(self):
        with InMemoryStore(
            InMemoryStoreOptions(sweep_interval_seconds=0.02, logger=NOOP_LOGGER)
        ) as st:
            s = Session(SessionOptions(timeout_seconds=0.2))
            st.add(s)
            for _ in range(8):
                time.sleep(0.05)
                assert st.get(s.id) is s

    def test_sweep_evicts_only_expired(self, idle_store):
        short = Session(SessionOptions(timeout_seconds=10))
        long = Session(SessionOptions(timeout_seconds=1000))
        idle_store.add(short)
        idle_store.add(long)

        evicted = idle_store.sweep(short.accessed + 11)

        assert evicted == [short.id]
        assert idle_store.get(short.id) is None
        assert idle_store.get(long.id) is long

    def test_sweep_skips_write_lock_when_nothing_expired(self, idle_store):
        s = Session(SessionOptions(timeout_seconds=10))
        idle_store.add(s)
        with patch.object(
            idle_store._lock, "acquire_write", wraps=idle_store._lock.acquire_write
        ) as acquire_write:
            assert idle_store.sweep(s.accessed + 5) == []
            acquire_write.assert_not_called()

    def test_sweep_rechecks_under_write_lock(self, idle_store):
        s = Session(SessionOptions(timeout_seconds=10))
        idle_store.add(s)
        now = s.accessed + 100
        original = idle_store._lock.acquire_write

        def refresh_then_acquire():
            # A get() sneaking in between the read scan and the write lock
            with patch("httpsession.session.time.time", return_value=now):
                s.access()
            original()

        with patch.object(
            idle_store._lock, "acquire_write", side_effect=refresh_then_acquire
        ):
            assert idle_store.sweep(now) == []

        assert idle_store.get(s.id) is s

    def test_sweep_logs_status_after_eviction(self, idle_store):
        s = Session(SessionOptions(timeout_seconds=1))
        idle_store.add(s)
        with patch("httpsession.in_memory_store.log_system_status") as mock_status:
            idle_store.sweep(s.accessed + 2)
            mock_status.assert_called_once_with("InMemoryStore", 0, 1)

            mock_status.reset_mock()
            idle_store.sweep(s.accessed + 3)
            mock_status.assert_not_called()


class TestInMemoryStoreClose:
    def test_close_stops_sweeper(self):
        st = InMemoryStore(InMemoryStoreOptions(sweep_interval_seconds=3600))
        assert st._sweeper.is_running
        start = time.monotonic()
        st.close()
        assert time.monotonic() - start < 1.0
        assert not st._sweeper.is_running
        assert st.closed

    def test_close_is_idempotent(self):
        st = InMemoryStore()
        st.close()
        st.close()

    def test_use_after_close_raises(self):
        st = InMemoryStore()
        s = Session()
        st.close()
        with pytest.raises(StoreClosedError):
            st.get(s.id)
        with pytest.raises(StoreClosedError):
            st.add(s)
        with pytest.raises(StoreClosedError):
            st.remove(s)

    def test_context_manager_closes(self):
        with InMemoryStore() as st:
            pass
        assert st.closed


class TestInMemoryStoreLogging:
    def test_lifecycle_events_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="httpsession.in_memory_store"):
            with InMemoryStore(InMemoryStoreOptions(sweep_interval_seconds=3600)) as st:
                s = Session()
                st.add(s)
                st.remove(s)
        messages = [r.getMessage() for r in caplog.records]
        assert f"Session added: {s.id}" in messages
        assert f"Session removed: {s.id}" in messages

    def test_custom_logger(self):
        custom = logging.getLogger("test.custom.store")
        with patch.object(custom, "info") as mock_info:
            with InMemoryStore(
                InMemoryStoreOptions(sweep_interval_seconds=3600, logger=custom)
            ) as st:
                s = Session(SessionOptions(timeout_seconds=1))
                st.add(s)
                with patch("httpsession.in_memory_store.log_system_status"):
                    st.sweep(s.accessed + 2)
        mock_info.assert_any_call("Session added: %s", s.id)
        mock_info.assert_any_call("Session timed out: %s", s.id)

    def test_noop_logger_is_silent(self, caplog):
        with caplog.at_level(logging.DEBUG):
            with InMemoryStore(
                InMemoryStoreOptions(sweep_interval_seconds=3600, logger=NOOP_LOGGER)
            ) as st:
                st.add(Session())
        assert not any("Session added" in r.getMessage() for r in caplog.records)

    def test_noop_logger_drops_records_before_handlers(self):
        handler = MagicMock(spec=logging.Handler)
        handler.level = logging.NOTSET
        NOOP_LOGGER.addHandler(handler)
        try:
            with InMemoryStore(
                InMemoryStoreOptions(sweep_interval_seconds=3600, logger=NOOP_LOGGER)
            ) as st:
                st.add(Session())
        finally:
            NOOP_LOGGER.removeHandler(handler)
        handler.handle.assert_not_called()


class TestInMemoryStoreStats:
    def test_storage_stats(self, idle_store):
        idle_store.add(Session())
        idle_store.add(Session())
        with patch("psutil.virtual_memory") as mock_vm:
            mock_vm.return_value.percent = 42.0
            stats = idle_store.get_storage_stats()
        assert stats.total_sessions == 2
        assert stats.memory_usage_percent == 42.0


class TestInMemoryStoreConcurrency:
    def test_concurrent_get_set_attr(self, store):
        s = Session(SessionOptions(attrs={"counter": 0}))
        store.add(s)
        errors = []

        def worker():
            try:
                for _ in range(100):
                    sess = store.get(s.id)
                    with sess.mutex.write_lock():
                        sess.set_attr("counter", sess.attr("counter") + 1)
            except Exception as exc:  # pragma: no cover
                errors.append(exc)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert s.attr("counter") == 800

    def test_concurrent_add_remove_get(self, store):
        errors = []

        def worker():
            try:
                for _ in range(50):
                    sess = Session()
                    store.add(sess)
                    assert store.get(sess.id) is sess
                    store.remove(sess)
                    assert store.get(sess.id) is None
            except Exception as exc:  # pragma: no cover
                errors.append(exc)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(store) == 0
