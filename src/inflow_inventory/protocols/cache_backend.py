"""Cache backend protocol.

Defines the raw storage interface under the CacheStore service. Backends
know nothing about namespaces, TTL tiers or hit counters: they store
CacheEntry objects under fully-qualified keys.

Implementations:
- In-process dict (default, lives as long as the process)
- Redis (shared across CLI invocations)
"""

from typing import Protocol, runtime_checkable

from inflow_inventory.entities import CacheEntry


@runtime_checkable
class CacheBackend(Protocol):
    """Protocol for cache storage backends.

    Any type that implements these methods satisfies the protocol,
    no explicit inheritance needed.

    Example:
        ```python
        backend: CacheBackend = InMemoryCacheBackend()
        backend: CacheBackend = RedisCacheBackend.create()
        ```
    """

    def get(self, key: str) -> CacheEntry | None:
        """Return the stored entry, expired or not, or None if absent.

        Args:
            key: Fully-qualified (namespaced) key
        """
        ...

    def set(self, key: str, entry: CacheEntry) -> None:
        """Store an entry, replacing any previous one.

        Args:
            key: Fully-qualified (namespaced) key
            entry: The entry to store
        """
        ...

    def delete(self, key: str) -> bool:
        """Delete one entry.

        Returns:
            True if the key was present, False otherwise
        """
        ...

    def keys(self, prefix: str) -> list[str]:
        """List stored keys starting with prefix.

        Args:
            prefix: Key prefix, usually "{namespace}:"

        Returns:
            Fully-qualified keys
        """
        ...
