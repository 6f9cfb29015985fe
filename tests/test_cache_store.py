"""
Tests for the namespaced TTL cache store.
"""

import re

import pytest

from inflow_inventory.config import Settings
from inflow_inventory.repositories import InMemoryCacheBackend
from inflow_inventory.services import CacheStore


def producer_of(value, calls: list):
    """An async producer that records each call."""

    async def produce():
        calls.append(value)
        return value

    return produce


def failing_producer(message: str = "boom"):
    async def produce():
        raise RuntimeError(message)

    return produce


@pytest.mark.asyncio
async def test_second_read_is_served_from_cache(cache):
    """A fresh entry is returned without calling the new producer."""
    calls = []
    first = await cache.get_or_fetch("p1", producer_of("V1", calls), ttl=300)
    stats = cache.get_stats()
    assert first == "V1"
    assert (stats.hits, stats.misses) == (0, 1)

    second = await cache.get_or_fetch("p1", producer_of("V2", calls), ttl=300)
    stats = cache.get_stats()
    assert second == "V1"
    assert calls == ["V1"]
    assert (stats.hits, stats.misses) == (1, 1)


@pytest.mark.asyncio
async def test_entry_expires_after_ttl(cache, clock):
    calls = []
    await cache.get_or_fetch("p1", producer_of("V1", calls), ttl=300)

    clock.advance(299)
    assert await cache.get_or_fetch("p1", producer_of("V2", calls), ttl=300) == "V1"

    # Visible only while now < expires_at
    clock.advance(1)
    assert await cache.get_or_fetch("p1", producer_of("V2", calls), ttl=300) == "V2"
    assert calls == ["V1", "V2"]


@pytest.mark.asyncio
async def test_zero_ttl_is_stale_on_next_read(cache):
    calls = []
    await cache.get_or_fetch("p1", producer_of("V1", calls), ttl=0)
    assert await cache.get_or_fetch("p1", producer_of("V2", calls), ttl=0) == "V2"
    assert cache.get_stats().misses == 2


@pytest.mark.asyncio
async def test_negative_ttl_is_stale_on_next_read(cache):
    calls = []
    await cache.get_or_fetch("p1", producer_of("V1", calls), ttl=-5)
    assert await cache.get_or_fetch("p1", producer_of("V2", calls)) == "V2"


@pytest.mark.asyncio
async def test_default_ttl_used_when_none_given(cache, clock):
    """The fixture store defaults to the short tier (300s)."""
    calls = []
    await cache.get_or_fetch("p1", producer_of("V1", calls))
    clock.advance(299)
    assert await cache.get_or_fetch("p1", producer_of("V2", calls)) == "V1"
    clock.advance(1)
    assert await cache.get_or_fetch("p1", producer_of("V2", calls)) == "V2"


@pytest.mark.asyncio
async def test_expired_entry_is_evicted_on_read(cache, clock, backend):
    await cache.get_or_fetch("p1", producer_of("V1", []), ttl=10)
    clock.advance(10)

    # Lazy expiry: still stored until someone reads it
    assert cache.get_stats().size == 1
    with pytest.raises(RuntimeError):
        await cache.get_or_fetch("p1", failing_producer(), ttl=10)
    assert backend.keys("test:") == []


@pytest.mark.asyncio
async def test_bypass_cache_never_touches_storage(cache):
    calls = []
    await cache.get_or_fetch("p1", producer_of("V1", calls))
    before = cache.get_stats()

    value = await cache.get_or_fetch("p1", producer_of("V2", calls), bypass_cache=True)

    assert value == "V2"
    assert cache.get_stats() == before
    # The stored entry was neither read nor replaced
    assert await cache.get_or_fetch("p1", producer_of("V3", calls)) == "V1"


@pytest.mark.asyncio
async def test_bypass_cache_does_not_store(cache):
    await cache.get_or_fetch("p1", producer_of("V1", []), bypass_cache=True)
    assert cache.get_stats().size == 0


@pytest.mark.asyncio
async def test_disable_invokes_every_producer(cache):
    cache.disable()
    calls = []

    first = await cache.get_or_fetch("p1", producer_of("A", calls))
    second = await cache.get_or_fetch("p1", producer_of("B", calls))

    assert (first, second) == ("A", "B")
    assert calls == ["A", "B"]
    stats = cache.get_stats()
    assert (stats.hits, stats.misses, stats.size) == (0, 0, 0)


@pytest.mark.asyncio
async def test_enable_restores_caching(cache):
    cache.disable()
    cache.enable()
    calls = []
    await cache.get_or_fetch("p1", producer_of("A", calls))
    assert await cache.get_or_fetch("p1", producer_of("B", calls)) == "A"


@pytest.mark.asyncio
async def test_caching_disabled_restores_state_after_error(cache):
    with pytest.raises(RuntimeError):
        with cache.caching_disabled():
            assert cache.enabled is False
            await cache.get_or_fetch("p1", failing_producer())

    assert cache.enabled is True


def test_caching_disabled_keeps_previous_disabled_state(cache):
    cache.disable()
    with cache.caching_disabled():
        pass
    assert cache.enabled is False


@pytest.mark.asyncio
async def test_none_and_empty_values_are_cached(cache):
    calls = []
    await cache.get_or_fetch("nothing", producer_of(None, calls))
    await cache.get_or_fetch("empty", producer_of([], calls))

    assert await cache.get_or_fetch("nothing", producer_of("other", calls)) is None
    assert await cache.get_or_fetch("empty", producer_of("other", calls)) == []
    assert calls == [None, []]
    assert cache.get_stats().hits == 2


@pytest.mark.asyncio
async def test_producer_errors_propagate_and_nothing_is_stored(cache):
    with pytest.raises(RuntimeError, match="remote down"):
        await cache.get_or_fetch("p1", failing_producer("remote down"))

    assert cache.get_stats().size == 0
    assert await cache.get_or_fetch("p1", producer_of("V1", [])) == "V1"


@pytest.mark.asyncio
async def test_sync_producer_is_supported(cache):
    value = await cache.get_or_fetch("p1", lambda: {"id": "p1"})
    assert value == {"id": "p1"}
    assert await cache.get_or_fetch("p1", lambda: {"id": "other"}) == {"id": "p1"}


@pytest.mark.asyncio
async def test_invalidate_reports_presence(cache):
    await cache.get_or_fetch("p1", producer_of("V1", []))

    assert cache.invalidate("p1") is True
    assert cache.invalidate("p1") is False
    assert cache.get_stats().size == 0


@pytest.mark.asyncio
async def test_invalidate_pattern_removes_only_matching_keys(cache, cached_keys):
    for key in ["stock:productId=p1", "stock_adjustments", "stock_transfer:id=t1", "products", "categories"]:
        await cache.get_or_fetch(key, producer_of(key, []))

    removed = cache.invalidate_pattern(r"^stock")

    assert removed == 3
    assert cached_keys() == {"products", "categories"}


@pytest.mark.asyncio
async def test_invalidate_pattern_accepts_compiled_regex(cache, cached_keys):
    for key in ["product:id=p1", "products", "product_bom:productId=p1"]:
        await cache.get_or_fetch(key, producer_of(key, []))

    assert cache.invalidate_pattern(re.compile(r"^product:")) == 1
    assert cached_keys() == {"products", "product_bom:productId=p1"}


@pytest.mark.asyncio
async def test_invalidate_pattern_matches_unnamespaced_keys(cache):
    """Patterns never see the namespace prefix."""
    await cache.get_or_fetch("stock:productId=p1", producer_of(1, []))
    assert cache.invalidate_pattern(r"^test:") == 0
    assert cache.invalidate_pattern(r"^stock") == 1


@pytest.mark.asyncio
async def test_clear_removes_namespace_entries(cache):
    for key in ["a", "b", "c"]:
        await cache.get_or_fetch(key, producer_of(key, []))

    assert cache.clear() == 3
    assert cache.get_stats().size == 0


@pytest.mark.asyncio
async def test_clear_does_not_reset_counters(cache):
    """Documented current behavior, not a hard guarantee: counters survive clear()."""
    await cache.get_or_fetch("a", producer_of("a", []))
    await cache.get_or_fetch("a", producer_of("a", []))

    cache.clear()

    stats = cache.get_stats()
    assert (stats.hits, stats.misses) == (1, 1)


@pytest.mark.asyncio
async def test_reset_stats(cache):
    await cache.get_or_fetch("a", producer_of("a", []))
    await cache.get_or_fetch("a", producer_of("a", []))

    cache.reset_stats()

    stats = cache.get_stats()
    assert (stats.hits, stats.misses, stats.size) == (0, 0, 1)


@pytest.mark.asyncio
async def test_hit_rate(cache):
    assert cache.get_stats().hit_rate == 0.0
    await cache.get_or_fetch("a", producer_of("a", []))
    await cache.get_or_fetch("a", producer_of("a", []))
    assert cache.get_stats().hit_rate == 0.5


@pytest.mark.asyncio
async def test_namespaces_sharing_a_backend_are_isolated(clock):
    shared = InMemoryCacheBackend()
    inventory = CacheStore(backend=shared, namespace="inventory", clock=clock)
    other = CacheStore(backend=shared, namespace="other", clock=clock)

    await inventory.get_or_fetch("stock:productId=p1", producer_of("mine", []))
    calls = []
    assert await other.get_or_fetch("stock:productId=p1", producer_of("theirs", calls)) == "theirs"
    assert calls == ["theirs"]

    assert other.invalidate_pattern(r"^stock") == 1
    assert other.clear() == 0
    assert inventory.get_stats().size == 1
    assert await inventory.get_or_fetch("stock:productId=p1", producer_of("x", [])) == "mine"


def test_create_uses_memory_backend_by_default():
    settings = Settings(cache_backend="memory", cache_namespace="ns", cache_default_ttl=60)
    store = CacheStore.create(settings)

    assert store.namespace == "ns"
    assert store.enabled is True
    assert store.get_stats().size == 0
