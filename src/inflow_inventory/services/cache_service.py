"""Cache service for core caching logic.

This service layers namespacing, TTL expiry, hit/miss counters and
pattern-based invalidation on top of a raw CacheBackend.
"""

import inspect
import re
import time
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from typing import Any

from inflow_inventory.config import Settings, get_redis_client, get_settings
from inflow_inventory.constants import DEFAULT_NAMESPACE, TTL
from inflow_inventory.entities import CacheEntry, CacheStats
from inflow_inventory.logging_config import get_logger
from inflow_inventory.protocols import CacheBackend
from inflow_inventory.repositories import InMemoryCacheBackend, RedisCacheBackend

logger = get_logger(__name__)

Producer = Callable[[], Awaitable[Any]] | Callable[[], Any]


class CacheStore:
    """Namespaced TTL cache over a pluggable backend.

    This service depends on the CacheBackend PROTOCOL, not a concrete
    implementation: the same store runs over a process-local dict or a
    shared Redis database.

    Every key is stored as "{namespace}:{key}". Callers never see the
    prefix, so stores with different namespaces can share one backend
    without seeing or clearing each other's entries.

    Expiry is lazy: a stale entry is evicted when it is read, never in the
    background.

    Example:
        ```python
        from inflow_inventory.services import CacheStore

        cache = CacheStore.create()
        products = await cache.get_or_fetch(
            "products:count=50",
            lambda: gateway.invoke("list_products", {"count": 50}),
            ttl=TTL.MEDIUM,
        )
        cache.invalidate_pattern(r"^products")
        ```
    """

    def __init__(
        self,
        backend: CacheBackend,
        namespace: str = DEFAULT_NAMESPACE,
        default_ttl: float = TTL.SHORT,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the cache store.

        Args:
            backend: Raw entry storage (required).
            namespace: Key prefix isolating this store from others on the same backend.
            default_ttl: TTL in seconds used when get_or_fetch gets none.
            clock: Time source, injectable for tests.
        """
        self._backend = backend
        self._namespace = namespace
        self._prefix = f"{namespace}:"
        self._default_ttl = default_ttl
        self._clock = clock
        self._enabled = True
        self._hits = 0
        self._misses = 0

    @classmethod
    def create(
        cls,
        settings: Settings | None = None,
        backend: CacheBackend | None = None,
    ) -> "CacheStore":
        """Factory method to create CacheStore from settings.

        Args:
            settings: Application settings. If None, uses get_settings().
            backend: Storage backend. If None, picked by settings.cache_backend.

        Returns:
            Configured CacheStore instance
        """
        settings = settings or get_settings()
        if backend is None:
            if settings.cache_backend == "redis":
                backend = RedisCacheBackend.create(get_redis_client(settings))
            else:
                backend = InMemoryCacheBackend.create()

        return cls(
            backend=backend,
            namespace=settings.cache_namespace,
            default_ttl=settings.cache_default_ttl,
        )

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def get_or_fetch(
        self,
        key: str,
        producer: Producer,
        ttl: float | None = None,
        bypass_cache: bool = False,
    ) -> Any:
        """Return the cached value for key, producing and storing it on a miss.

        Business logic:
        1. Disabled or bypassing: run the producer, touch neither storage
           nor counters
        2. Fresh entry: count a hit and return it without running the producer
        3. Otherwise: count a miss, run the producer, store the result with
           expiry now + ttl, return it

        The producer may be a coroutine function or a plain callable. Its
        exceptions propagate unchanged and nothing is stored.

        Args:
            key: Un-namespaced cache key (see build_cache_key)
            producer: Zero-argument callable fetching the value
            ttl: Time-to-live in seconds. If None, uses the store default.
            bypass_cache: Skip the cache for this call only

        Returns:
            The cached or freshly produced value
        """
        if not self._enabled or bypass_cache:
            return await _run(producer)

        full_key = self._prefix + key
        entry = self._backend.get(full_key)
        if entry is not None:
            if entry.is_fresh(self._clock()):
                self._hits += 1
                logger.debug("Cache hit", key=key)
                return entry.value
            self._backend.delete(full_key)

        self._misses += 1
        logger.debug("Cache miss", key=key)

        value = await _run(producer)
        ttl = self._default_ttl if ttl is None else ttl
        self._backend.set(full_key, CacheEntry.create(value, ttl=ttl, now=self._clock()))
        return value

    def invalidate(self, key: str) -> bool:
        """Remove one entry.

        Returns:
            True if the key was present
        """
        removed = self._backend.delete(self._prefix + key)
        if removed:
            logger.debug("Cache invalidated", key=key)
        return removed

    def invalidate_pattern(self, pattern: str | re.Pattern[str]) -> int:
        """Remove every entry whose un-namespaced key matches pattern.

        Matching uses pattern.search, so anchor with "^" for prefix purges.

        Args:
            pattern: Regular expression, as a string or compiled

        Returns:
            Number of entries removed
        """
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        removed = 0
        for full_key in self._backend.keys(self._prefix):
            if regex.search(full_key[len(self._prefix) :]) and self._backend.delete(full_key):
                removed += 1

        logger.debug("Cache pattern invalidated", pattern=regex.pattern, removed=removed)
        return removed

    def clear(self) -> int:
        """Remove every entry of this namespace.

        Hit/miss counters are left untouched; use reset_stats() for those.

        Returns:
            Number of entries removed
        """
        removed = sum(1 for full_key in self._backend.keys(self._prefix) if self._backend.delete(full_key))
        logger.info("Cache cleared", namespace=self._namespace, removed=removed)
        return removed

    def enable(self) -> None:
        self._enabled = True

    def disable(self) -> None:
        self._enabled = False

    @contextmanager
    def caching_disabled(self) -> Iterator["CacheStore"]:
        """Disable caching for a block, restoring the previous state on exit.

        Example:
            ```python
            with cache.caching_disabled():
                current = await client.get_product(product_id)
            ```
        """
        previous = self._enabled
        self._enabled = False
        try:
            yield self
        finally:
            self._enabled = previous

    def get_stats(self) -> CacheStats:
        """Get hit/miss counters and the current entry count."""
        return CacheStats(
            hits=self._hits,
            misses=self._misses,
            size=len(self._backend.keys(self._prefix)),
        )

    def reset_stats(self) -> None:
        self._hits = 0
        self._misses = 0


async def _run(producer: Producer) -> Any:
    result = producer()
    if inspect.isawaitable(result):
        result = await result
    return result
