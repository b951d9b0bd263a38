"""Unit tests for CacheService (TTL, falsy results, invalidation, lifecycle)."""

import asyncio

import pytest

from tenancy.infrastructure.cache import CacheService, policies_key, tenant_key


class CountingFetch:
    def __init__(self, value):
        self.value = value
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        return self.value


async def test_get_or_fetch_twice_within_ttl_fetches_once(cache: CacheService) -> None:
    """Second call inside the TTL window is served from cache."""
    fetch = CountingFetch({"id": "hq"})
    first = await cache.get_or_fetch("tenant:hq", fetch, ttl=300)
    second = await cache.get_or_fetch("tenant:hq", fetch, ttl=300)
    assert first == second == {"id": "hq"}
    assert fetch.calls == 1


async def test_get_or_fetch_after_expiry_fetches_again(cache: CacheService, clock) -> None:
    """A read at or past expiry triggers a fresh fetch."""
    fetch = CountingFetch("value")
    await cache.get_or_fetch("k", fetch, ttl=300)
    clock.advance(300)
    await cache.get_or_fetch("k", fetch, ttl=300)
    assert fetch.calls == 2


async def test_entry_just_before_expiry_is_still_served(cache: CacheService, clock) -> None:
    fetch = CountingFetch("value")
    await cache.get_or_fetch("k", fetch, ttl=300)
    clock.advance(299.9)
    await cache.get_or_fetch("k", fetch, ttl=300)
    assert fetch.calls == 1


@pytest.mark.parametrize("empty", [None, [], (), "", 0, {}])
async def test_falsy_result_is_returned_but_not_cached(cache: CacheService, empty) -> None:
    fetch = CountingFetch(empty)
    assert await cache.get_or_fetch("k", fetch, ttl=300) == empty
    await cache.get_or_fetch("k", fetch, ttl=300)
    assert fetch.calls == 2
    assert cache.stats()["size"] == 0


async def test_set_resets_expiry(cache: CacheService, clock) -> None:
    cache.set("k", "v1", ttl=10)
    clock.advance(8)
    cache.set("k", "v2", ttl=10)
    clock.advance(8)
    assert cache.get("k") == "v2"


def test_set_rejects_non_positive_ttl(cache: CacheService) -> None:
    with pytest.raises(ValueError):
        cache.set("k", "v", ttl=0)


async def test_fetch_error_propagates_and_caches_nothing(cache: CacheService) -> None:
    async def boom():
        raise RuntimeError("db down")

    with pytest.raises(RuntimeError):
        await cache.get_or_fetch("k", boom, ttl=60)
    assert cache.stats() == {"size": 0, "keys": []}


def test_invalidate_and_invalidate_prefix(cache: CacheService) -> None:
    cache.set(tenant_key("hq"), "hq", ttl=60)
    cache.set(policies_key("CatalogMgr"), ("p",), ttl=60)
    cache.set(policies_key("OrderOps"), ("p",), ttl=60)
    assert cache.invalidate(tenant_key("hq")) is True
    assert cache.invalidate(tenant_key("hq")) is False
    assert cache.invalidate_prefix("policies:") == 2
    assert cache.stats()["size"] == 0


def test_stats_and_clear(cache: CacheService) -> None:
    cache.set("a", 1, ttl=60)
    cache.set("b", 2, ttl=60)
    stats = cache.stats()
    assert stats["size"] == 2
    assert sorted(stats["keys"]) == ["a", "b"]
    cache.clear()
    assert cache.stats() == {"size": 0, "keys": []}


async def test_shutdown_drops_entries_and_ignores_later_writes(cache: CacheService) -> None:
    cache.set("a", 1, ttl=60)
    await cache.shutdown()
    assert cache.is_closed
    cache.set("b", 2, ttl=60)
    assert cache.stats()["size"] == 0


async def test_instances_are_isolated(clock) -> None:
    first = CacheService(clock=clock)
    second = CacheService(clock=clock)
    first.set("k", "v", ttl=60)
    assert second.get("k") is None


async def test_concurrent_misses_each_fetch_by_default(clock) -> None:
    """Without coalescing, simultaneous misses each hit the backing store."""
    cache = CacheService(clock=clock)
    gate = asyncio.Event()
    calls = 0

    async def slow():
        nonlocal calls
        calls += 1
        await gate.wait()
        return "v"

    tasks = [asyncio.create_task(cache.get_or_fetch("k", slow, ttl=60)) for _ in range(3)]
    await asyncio.sleep(0)
    gate.set()
    assert await asyncio.gather(*tasks) == ["v", "v", "v"]
    assert calls == 3


async def test_coalesced_concurrent_misses_share_one_fetch(clock) -> None:
    cache = CacheService(clock=clock, coalesce_fetches=True)
    gate = asyncio.Event()
    calls = 0

    async def slow():
        nonlocal calls
        calls += 1
        await gate.wait()
        return "v"

    tasks = [asyncio.create_task(cache.get_or_fetch("k", slow, ttl=60)) for _ in range(3)]
    await asyncio.sleep(0)
    gate.set()
    assert await asyncio.gather(*tasks) == ["v", "v", "v"]
    assert calls == 1


async def test_coalesced_fetch_error_reaches_every_waiter(clock) -> None:
    cache = CacheService(clock=clock, coalesce_fetches=True)
    gate = asyncio.Event()

    async def failing():
        await gate.wait()
        raise RuntimeError("db down")

    tasks = [asyncio.create_task(cache.get_or_fetch("k", failing, ttl=60)) for _ in range(2)]
    await asyncio.sleep(0)
    gate.set()
    results = await asyncio.gather(*tasks, return_exceptions=True)
    assert all(isinstance(r, RuntimeError) for r in results)
