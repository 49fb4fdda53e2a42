"""Tests for the bounded LRU cache used for compiled templates."""

import threading

from liquor.utils.lru_cache import LRUCache


class TestLRUCacheBasics:
    """get/set and eviction order."""

    def test_get_missing_returns_default(self):
        cache: LRUCache[str, int] = LRUCache(maxsize=2)
        assert cache.get("a") is None
        assert cache.get("a", 5) == 5

    def test_set_then_get(self):
        cache: LRUCache[str, int] = LRUCache(maxsize=2)
        cache.set("a", 1)
        assert cache.get("a") == 1
        assert "a" in cache
        assert len(cache) == 1

    def test_evicts_least_recently_used(self):
        cache: LRUCache[str, int] = LRUCache(maxsize=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.get("a")
        cache.set("c", 3)
        assert "a" in cache
        assert "b" not in cache
        assert "c" in cache

    def test_overwrite_refreshes_entry(self):
        cache: LRUCache[str, int] = LRUCache(maxsize=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("a", 10)
        cache.set("c", 3)
        assert cache.get("a") == 10
        assert "b" not in cache

    def test_zero_maxsize_disables(self):
        cache: LRUCache[str, int] = LRUCache(maxsize=0)
        cache.set("a", 1)
        assert len(cache) == 0
        assert cache.get_or_set("a", lambda: 2) == 2
        assert "a" not in cache


class TestGetOrSet:
    """get_or_set computes once per key."""

    def test_factory_runs_on_miss_only(self):
        calls = []

        def factory():
            calls.append(1)
            return "value"

        cache: LRUCache[str, str] = LRUCache(maxsize=4)
        assert cache.get_or_set("k", factory) == "value"
        assert cache.get_or_set("k", factory) == "value"
        assert len(calls) == 1

    def test_factory_error_is_not_cached(self):
        cache: LRUCache[str, str] = LRUCache(maxsize=4)

        def failing():
            raise LookupError("nope")

        try:
            cache.get_or_set("k", failing)
        except LookupError:
            pass
        assert "k" not in cache
        assert cache.get_or_set("k", lambda: "ok") == "ok"

    def test_concurrent_access(self):
        cache: LRUCache[int, int] = LRUCache(maxsize=8)
        errors = []

        def worker(offset):
            try:
                for i in range(200):
                    key = (i + offset) % 16
                    assert cache.get_or_set(key, lambda key=key: key * 2) == key * 2
            except AssertionError as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert len(cache) <= 8


class TestStats:
    """Hit/miss accounting."""

    def test_stats(self):
        cache: LRUCache[str, int] = LRUCache(maxsize=3, name="templates")
        cache.get_or_set("a", lambda: 1)
        cache.get_or_set("a", lambda: 1)
        cache.get("b")
        assert cache.stats() == {
            "name": "templates",
            "size": 1,
            "maxsize": 3,
            "hits": 1,
            "misses": 2,
        }

    def test_clear_resets_counters(self):
        cache: LRUCache[str, int] = LRUCache(maxsize=3)
        cache.get_or_set("a", lambda: 1)
        cache.clear()
        stats = cache.stats()
        assert stats["size"] == 0
        assert stats["hits"] == 0
        assert stats["misses"] == 0

    def test_repr(self):
        cache: LRUCache[str, int] = LRUCache(maxsize=3, name="templates")
        cache.set("a", 1)
        assert repr(cache) == "<LRUCache 'templates' 1/3>"
