"""
Tests for the card response cache
"""
import threading

import sys
sys.path.insert(0, '.')

from src.cards.cache import CARDS_CACHE_GROUP, ResponseCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestResponseCache:
    """Test suite for ResponseCache."""

    def setup_method(self):
        """Setup test fixtures."""
        self.clock = FakeClock()
        self.cache = ResponseCache(ttl_seconds=60, clock=self.clock)

    def test_miss_returns_none(self):
        assert self.cache.get("abc1234") is None

    def test_set_then_get(self):
        self.cache.set("abc1234", {"card_id": "abc1234"})
        assert self.cache.get("abc1234") == {"card_id": "abc1234"}

    def test_entry_expires_after_ttl(self):
        """Test entries are dropped once the TTL has passed."""
        self.cache.set("abc1234", {"card_id": "abc1234"})

        self.clock.now += 59
        assert self.cache.get("abc1234") is not None

        self.clock.now += 1
        assert self.cache.get("abc1234") is None
        assert len(self.cache) == 0

    def test_clear_group_only_purges_that_group(self):
        """Test purge-by-group keeps other groups."""
        self.cache.set("abc1234", 1, group=CARDS_CACHE_GROUP)
        self.cache.set("xyz9876", 2, group=CARDS_CACHE_GROUP)
        self.cache.set("floodgauges", 3, group="/floodgauges")

        purged = self.cache.clear(CARDS_CACHE_GROUP)

        assert purged == 2
        assert self.cache.get("abc1234") is None
        assert self.cache.get("xyz9876") is None
        assert self.cache.get("floodgauges") == 3

    def test_clear_all(self):
        self.cache.set("abc1234", 1)
        self.cache.set("floodgauges", 3, group="/floodgauges")

        assert self.cache.clear() == 2
        assert len(self.cache) == 0

    def test_disabled_cache_never_stores(self):
        cache = ResponseCache(ttl_seconds=60, enabled=False)
        cache.set("abc1234", 1)

        assert cache.get("abc1234") is None
        assert len(cache) == 0

    def test_isolated_instances(self):
        """Test two caches share no state."""
        other = ResponseCache(ttl_seconds=60)
        self.cache.set("abc1234", 1)

        assert other.get("abc1234") is None

    def test_concurrent_access(self):
        """Test concurrent writers and purges leave the cache consistent."""
        cache = ResponseCache(ttl_seconds=60)

        def writer(prefix):
            for i in range(200):
                cache.set(f"{prefix}{i}", i)

        def purger():
            for _ in range(50):
                cache.clear(CARDS_CACHE_GROUP)

        threads = [threading.Thread(target=writer, args=(p,)) for p in "abc"]
        threads.append(threading.Thread(target=purger))
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(cache) <= 600
        cache.clear(CARDS_CACHE_GROUP)
        assert len(cache) == 0
