"""Tests for the TTL cache and its stale-on-error policy."""

import logging
import threading
from unittest.mock import Mock

import pytest

from cms_gateway.domain.errors import CMSError, CMSErrorCode
from cms_gateway.infrastructure.cache import DEFAULT_TTL_SECONDS, TTLCache


@pytest.fixture
def cache(clock):
    return TTLCache(ttl_seconds=60, name="test", clock=clock)


class TestGetOrFetch:
    """Tests for TTLCache.get_or_fetch."""

    def test_default_ttl_is_one_hour(self):
        assert TTLCache().ttl_seconds == DEFAULT_TTL_SECONDS == 3600

    def test_hit_within_ttl_does_not_refetch(self, cache, clock):
        fetcher = Mock(return_value=["P1", "P2"])

        first = cache.get_or_fetch("products", fetcher)
        clock.advance(59)
        second = cache.get_or_fetch("products", fetcher)

        assert first == second == ["P1", "P2"]
        fetcher.assert_called_once()

    def test_expired_entry_is_refetched(self, cache, clock):
        fetcher = Mock(side_effect=[["old"], ["new"]])

        cache.get_or_fetch("products", fetcher)
        clock.advance(61)

        assert cache.get_or_fetch("products", fetcher) == ["new"]
        assert fetcher.call_count == 2

    def test_stale_value_returned_when_refresh_fails(self, cache, clock):
        cache.get_or_fetch("products", lambda: ["P1"])
        clock.advance(120)

        failing = Mock(side_effect=CMSError("down", CMSErrorCode.CONNECTION_ERROR))

        assert cache.get_or_fetch("products", failing) == ["P1"]
        failing.assert_called_once()

    def test_cold_miss_propagates_error(self, cache):
        error = CMSError("nope", CMSErrorCode.UNAUTHORIZED)

        with pytest.raises(CMSError) as excinfo:
            cache.get_or_fetch("products", Mock(side_effect=error))

        assert excinfo.value.code is CMSErrorCode.UNAUTHORIZED
        assert "products" not in cache

    def test_none_is_a_cached_value(self, cache):
        fetcher = Mock(return_value=None)

        assert cache.get_or_fetch("product:missing", fetcher) is None
        assert cache.get_or_fetch("product:missing", fetcher) is None
        fetcher.assert_called_once()

    def test_interrupt_writes_nothing(self, cache):
        with pytest.raises(KeyboardInterrupt):
            cache.get_or_fetch("products", Mock(side_effect=KeyboardInterrupt))

        assert len(cache) == 0

    def test_keys_are_independent(self, cache):
        cache.get_or_fetch("product:a", lambda: "A")
        cache.get_or_fetch("product:b", lambda: "B")

        assert cache.get_or_fetch("product:a", Mock()) == "A"
        assert cache.get_or_fetch("product:b", Mock()) == "B"

    def test_scenario_stale_after_ttl_expiry(self, cache, clock):
        backend_fetch = Mock(return_value=["P1", "P2"])

        assert cache.get_or_fetch("products", backend_fetch) == ["P1", "P2"]

        clock.now = 30
        assert cache.get_or_fetch("products", backend_fetch) == ["P1", "P2"]
        assert backend_fetch.call_count == 1

        clock.now = 61
        backend_fetch.side_effect = CMSError("timeout", CMSErrorCode.CONNECTION_ERROR)
        assert cache.get_or_fetch("products", backend_fetch) == ["P1", "P2"]
        assert backend_fetch.call_count == 2


class TestEviction:
    """Tests for clearing and invalidating entries."""

    def test_clear_forces_refetch(self, cache):
        fetcher = Mock(side_effect=[1, 2])
        cache.get_or_fetch("products", fetcher)

        cache.clear()

        assert len(cache) == 0
        assert cache.get_or_fetch("products", fetcher) == 2

    def test_clear_does_not_fetch(self, cache):
        fetcher = Mock(return_value=1)
        cache.get_or_fetch("products", fetcher)

        cache.clear()

        fetcher.assert_called_once()

    def test_cleared_entry_has_no_stale_fallback(self, cache):
        cache.get_or_fetch("products", lambda: ["P1"])
        cache.clear()

        with pytest.raises(CMSError):
            cache.get_or_fetch("products", Mock(side_effect=CMSError("down")))

    def test_invalidate_prefix(self, cache):
        for key in ("products", "product:a", "product-slugs", "articles:all", "team-members"):
            cache.get_or_fetch(key, lambda: key)

        evicted = cache.invalidate_prefix("product")

        assert evicted == 3
        assert "articles:all" in cache
        assert "team-members" in cache
        assert "products" not in cache

    def test_clear_during_fetch_discards_result(self, cache):
        def fetcher():
            cache.clear()
            return ["P1"]

        assert cache.get_or_fetch("products", fetcher) == ["P1"]
        assert "products" not in cache

    def test_invalidation_during_fetch_discards_result(self, cache):
        def fetcher():
            cache.invalidate_prefix("product")
            return "A"

        assert cache.get_or_fetch("product:a", fetcher) == "A"
        assert "product:a" not in cache


class TestStaleLogging:
    def test_stale_fallback_logs_warning(self, cache, clock, caplog):
        cache.get_or_fetch("products", lambda: ["P1"])
        clock.advance(61)

        with caplog.at_level(logging.WARNING, logger="cms_gateway.infrastructure.cache.ttl_cache"):
            cache.get_or_fetch("products", Mock(side_effect=CMSError("down", CMSErrorCode.CONNECTION_ERROR)))

        warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "stale" in warnings[0].getMessage()
        assert "products" in warnings[0].getMessage()


class TestConcurrency:
    def test_fetches_for_different_keys_do_not_block_each_other(self, cache):
        b_started = threading.Event()
        results = {}

        def fetch_a():
            results["a_saw_b"] = b_started.wait(timeout=5)
            return "A"

        def fetch_b():
            b_started.set()
            return "B"

        worker = threading.Thread(target=lambda: results.update(a=cache.get_or_fetch("a", fetch_a)))
        worker.start()
        assert cache.get_or_fetch("b", fetch_b) == "B"
        worker.join(timeout=5)

        assert results == {"a_saw_b": True, "a": "A"}
        assert "a" in cache and "b" in cache

    def test_concurrent_misses_on_one_key_each_fetch(self, cache):
        barrier = threading.Barrier(2, timeout=5)
        calls = []
        results = []

        def fetcher():
            calls.append(threading.get_ident())
            barrier.wait()
            return ["P1"]

        workers = [
            threading.Thread(target=lambda: results.append(cache.get_or_fetch("products", fetcher)))
            for _ in range(2)
        ]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join(timeout=5)

        assert results == [["P1"], ["P1"]]
        assert len(calls) == 2
        assert cache.get_or_fetch("products", Mock()) == ["P1"]
