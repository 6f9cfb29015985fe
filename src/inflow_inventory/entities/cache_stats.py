"""Cache statistics domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CacheStats:
    """Snapshot of cache counters.

    Attributes:
        hits: Reads served from the cache since start (or last reset_stats)
        misses: Reads that invoked the producer since start (or last reset_stats)
        size: Entries currently stored in the namespace, including expired
            entries not yet evicted
    """

    hits: int
    misses: int
    size: int

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total
