"""Tests for memocache.cache.namespaced: NamespacedCache facade and key helpers."""

import asyncio
from datetime import date, datetime
from unittest.mock import AsyncMock

import pytest

from memocache.cache.namespaced import NamespacedCache, filter_key, join_key
from tests.factories import make_cache

TIERS = {"master_data": 1800, "transactions": 600, "stats": 300}
DEPENDENCIES = {
    "categories": ["stats"],
    "bank_accounts": ["revenues", "expenses"],
    "revenues": ["revenue", "stats", "monthly_summary"],
    "expenses": ["expense", "stats", "monthly_summary"],
}


@pytest.fixture
def financial(clock):
    cache = make_cache(clock, max_entries=100)
    return NamespacedCache(cache, "financial", ttl_tiers=TIERS, dependencies=DEPENDENCIES)


class TestKeyHelpers:
    def test_join_key(self):
        assert join_key("revenue", 42) == "revenue:42"

    def test_filter_key_is_order_independent(self):
        a = filter_key({"status": ["paid", "open"], "category_ids": [2, 1]})
        b = filter_key({"category_ids": [1, 2], "status": ["open", "paid"]})
        assert a == b == "category_ids:1,2|status:open,paid"

    def test_filter_key_dates(self):
        key = filter_key({"start": date(2024, 1, 5), "end": datetime(2024, 2, 1, 15, 30)})
        assert key == "end:2024-02-01|start:2024-01-05"

    def test_filter_key_quotes_strings(self):
        assert filter_key({"search": "a b/c"}) == "search:a%20b%2Fc"

    def test_filter_key_skips_empty_values(self):
        assert filter_key({"status": [], "search": "", "start": None, "page": 0}) == "page:0"


class TestNamespacedCache:
    def test_keys_are_prefixed(self, financial):
        financial.set("categories", value=["food"])
        assert financial.cache.get("financial:categories") == ["food"]
        assert financial.get("categories") == ["food"]
        assert financial.has("categories") is True

    def test_key_joins_parts(self, financial):
        assert financial.key("revenue", 42) == "financial:revenue:42"
        assert financial.key("categories") == "financial:categories"

    def test_multi_part_keys(self, financial):
        financial.set("revenue", 42, value={"amount": 100})
        assert financial.cache.get("financial:revenue:42") == {"amount": 100}
        assert financial.get("revenue", 42) == {"amount": 100}
        assert financial.get("revenue", 43, default="none") == "none"
        assert financial.delete("revenue", 42) is True
        assert financial.has("revenue", 42) is False

    def test_get_default(self, financial):
        assert financial.get("missing", default=[]) == []

    def test_tier_ttl(self, financial, clock):
        financial.set("stats", value={"total": 10}, tier="stats")
        clock.advance(299)
        assert financial.get("stats") == {"total": 10}
        clock.advance(2)
        assert financial.get("stats") is None

    def test_explicit_ttl_overrides_tier(self, financial, clock):
        financial.set("stats", value=1, tier="master_data", ttl_seconds=10)
        clock.advance(11)
        assert financial.has("stats") is False

    def test_unknown_tier_raises(self, financial):
        with pytest.raises(KeyError):
            financial.set("x", value=1, tier="nope")

    def test_delete(self, financial):
        financial.set("x", value=1)
        assert financial.delete("x") is True
        assert financial.has("x") is False

    async def test_get_or_set_uses_tier(self, financial, clock):
        factory = AsyncMock(return_value=[1, 2])
        assert await financial.get_or_set("bank_accounts", factory=factory, tier="master_data") == [1, 2]
        clock.advance(1000)
        assert await financial.get_or_set("bank_accounts", factory=factory, tier="master_data") == [1, 2]
        factory.assert_awaited_once()

    async def test_get_or_set_multi_part_key(self, financial):
        factory = AsyncMock(return_value={"id": 7})
        assert await financial.get_or_set("expense", 7, factory=factory) == {"id": 7}
        assert financial.cache.has("financial:expense:7") is True

    def test_invalidate_group_covers_subkeys_only(self, financial):
        financial.set("revenues", value=[])
        financial.set("revenues", "filtered", "status:paid", value=[])
        financial.set("revenues_archive", value=[])

        assert financial.invalidate("revenues") == 2
        assert financial.has("revenues_archive") is True

    def test_invalidate_cascades(self, financial):
        financial.set("categories", value=[])
        financial.set("stats", value={})
        financial.set("stats", "filtered", "x", value={})
        financial.set("bank_accounts", value=[])

        assert financial.invalidate("categories") == 3
        assert financial.has("bank_accounts") is True

    def test_invalidate_cascades_transitively(self, financial):
        financial.set("bank_accounts", value=[])
        financial.set("revenue", 1, value={})
        financial.set("expense", 2, value={})
        financial.set("monthly_summary", "2024-01", value={})
        financial.set("stats", value={})
        financial.set("categories", value=[])

        assert financial.invalidate("bank_accounts") == 5
        assert financial.has("categories") is True

    def test_invalidate_all(self, financial):
        financial.set("a", value=1)
        financial.set("b", value=2)
        financial.cache.set("other:a", 3)
        assert financial.invalidate_all() == 2
        assert financial.cache.has("other:a") is True

    async def test_preload(self, financial):
        loaders = {
            "categories": AsyncMock(return_value=["food"]),
            "bank_accounts": AsyncMock(return_value=["checking"]),
        }
        result = await financial.preload(loaders, tier="master_data")
        assert result == {"categories": ["food"], "bank_accounts": ["checking"]}
        assert financial.get("categories") == ["food"]

    async def test_preload_runs_concurrently(self, financial):
        running = 0
        peak = 0

        async def loader():
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.01)
            running -= 1
            return "v"

        await financial.preload({"a": loader, "b": loader, "c": loader})
        assert peak == 3
