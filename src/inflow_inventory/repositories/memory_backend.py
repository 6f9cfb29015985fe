"""In-process implementation of CacheBackend.

The default backend: entries live as long as the process, which for the CLI
means one command. Long-lived embedders (scripts, notebooks) get the full
benefit.
"""

from inflow_inventory.entities import CacheEntry


class InMemoryCacheBackend:
    """Dict-backed CacheBackend.

    This class satisfies the CacheBackend protocol through structural
    typing - no explicit inheritance needed.

    Values are stored by reference; callers must not mutate what they get
    back from the cache.
    """

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}

    @classmethod
    def create(cls) -> "InMemoryCacheBackend":
        """Factory method, for symmetry with RedisCacheBackend.create()."""
        return cls()

    def get(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def set(self, key: str, entry: CacheEntry) -> None:
        self._entries[key] = entry

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def keys(self, prefix: str) -> list[str]:
        return [key for key in self._entries if key.startswith(prefix)]
