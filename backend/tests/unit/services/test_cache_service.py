"""
Unit Tests for the in-process TTL cache
"""
import pytest
from unittest.mock import patch

from app.services.cache_service import CacheService


@pytest.fixture
def cache():
    return CacheService(default_ttl=60, max_keys=3)


class TestCacheBasics:

    def test_get_miss_returns_none(self, cache):
        assert cache.get("missing") is None
        assert cache.stats()["misses"] == 1

    def test_set_and_get(self, cache):
        cache.set("services:all", [1, 2, 3])
        assert cache.get("services:all") == [1, 2, 3]
        assert cache.has("services:all") is True

    def test_expiry(self, cache):
        with patch.object(CacheService, "_now", return_value=1000.0):
            cache.set("key", "value", ttl=10)
        with patch.object(CacheService, "_now", return_value=1011.0):
            assert cache.get("key") is None
            assert cache.has("key") is False

    def test_zero_ttl_never_expires(self, cache):
        with patch.object(CacheService, "_now", return_value=0.0):
            cache.set("key", "value", ttl=0)
        with patch.object(CacheService, "_now", return_value=10 ** 9):
            assert cache.get("key") == "value"

    def test_lru_eviction(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)
        cache.get("a")  # a becomes most recently used
        cache.set("d", 4)

        assert cache.get("b") is None
        assert cache.get("a") == 1
        assert cache.stats()["evictions"] == 1

    def test_delete_pattern(self, cache):
        cache.set("products:1", 1)
        cache.set("products:2", 2)
        cache.set("services:1", 3)

        assert cache.delete_pattern("products:*") == 2
        assert cache.keys() == ["services:1"]

    def test_get_many_skips_missing(self, cache):
        cache.set("a", 1)
        assert cache.get_many(["a", "b"]) == {"a": 1}

    def test_stats_hit_rate_format(self, cache):
        cache.set("a", 1)
        cache.get("a")
        cache.get("b")
        stats = cache.stats()

        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_rate"] == "50.00%"
        assert stats["keys"] == 1

    def test_clear_resets_counters(self, cache):
        cache.set("a", 1)
        cache.get("a")
        cache.clear()

        assert cache.keys() == []
        assert cache.stats()["hits"] == 0

    @pytest.mark.asyncio
    async def test_get_or_set_calls_factory_once(self, cache):
        calls = []

        async def factory():
            calls.append(1)
            return {"value": 42}

        assert await cache.get_or_set("k", factory) == {"value": 42}
        assert await cache.get_or_set("k", factory) == {"value": 42}
        assert len(calls) == 1


class TestResourceHelpers:

    def test_make_key_is_stable(self):
        first = CacheService.make_key("list", {"page": 1, "category": None, "search": "web"})
        second = CacheService.make_key("list", {"search": "web", "page": 1})
        assert first == second
        assert CacheService.make_key("list") == "list:all"

    def test_invalidate_awards_drops_categories_and_nominations(self):
        cache = CacheService()
        cache.set_award_categories(["cat"])
        cache.set_nominations("list:all", {"items": []})
        cache.set_services("list:all", {"items": []})

        assert cache.invalidate_awards() == 2
        assert cache.get_award_categories() is None
        assert cache.get_services("list:all") == {"items": []}

    def test_partner_helpers(self):
        cache = CacheService()
        cache.set_partners([{"name": "Acme"}])
        assert cache.get_partners() == [{"name": "Acme"}]
        cache.invalidate_partners()
        assert cache.get_partners() is None
