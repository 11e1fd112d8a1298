"""
Tests for the explicit TTL response cache.
"""

import pytest

from pipeline.cache import ResponseCache


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class TestResponseCache:
    """Tests for ResponseCache."""

    def test_set_and_get(self):
        cache = ResponseCache(ttl_seconds=60, clock=FakeClock())

        cache.set('k', [1, 2])

        assert cache.get('k') == [1, 2]
        assert len(cache) == 1

    def test_entry_expires(self):
        clock = FakeClock()
        cache = ResponseCache(ttl_seconds=60, clock=clock)
        cache.set('k', 'v')

        clock.advance(59.9)
        assert cache.get('k') == 'v'

        clock.advance(0.1)
        assert cache.get('k') is None
        assert len(cache) == 0

    def test_get_or_fetch_calls_once(self):
        cache = ResponseCache(ttl_seconds=60, clock=FakeClock())
        calls = []

        def fetch():
            calls.append(1)
            return 'fresh'

        assert cache.get_or_fetch('k', fetch) == 'fresh'
        assert cache.get_or_fetch('k', fetch) == 'fresh'
        assert len(calls) == 1

    def test_get_or_fetch_refetches_after_expiry(self):
        clock = FakeClock()
        cache = ResponseCache(ttl_seconds=10, clock=clock)
        values = iter(['first', 'second'])

        assert cache.get_or_fetch('k', lambda: next(values)) == 'first'
        clock.advance(10)
        assert cache.get_or_fetch('k', lambda: next(values)) == 'second'

    def test_fetch_errors_are_not_cached(self):
        cache = ResponseCache(ttl_seconds=60, clock=FakeClock())

        def failing():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            cache.get_or_fetch('k', failing)
        assert cache.get('k') is None

    def test_zero_ttl_disables_caching(self):
        cache = ResponseCache(ttl_seconds=0, clock=FakeClock())

        cache.set('k', 'v')

        assert cache.get('k') is None

    def test_invalidate_and_clear(self):
        cache = ResponseCache(ttl_seconds=60, clock=FakeClock())
        cache.set('a', 1)
        cache.set('b', 2)

        assert cache.invalidate('a') is True
        assert cache.invalidate('a') is False
        cache.clear()
        assert cache.get('b') is None

    def test_instances_are_isolated(self):
        first = ResponseCache(clock=FakeClock())
        second = ResponseCache(clock=FakeClock())

        first.set('k', 'v')

        assert second.get('k') is None

    def test_negative_ttl(self):
        with pytest.raises(ValueError):
            ResponseCache(ttl_seconds=-1)
