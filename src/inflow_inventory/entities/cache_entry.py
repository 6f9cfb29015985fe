"""Cache entry domain entity."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CacheEntry:
    """A cached value and the moment it stops being visible.

    Attributes:
        value: The cached payload (any JSON-like value, including None)
        expires_at: Unix timestamp; the entry is fresh only while now < expires_at
    """

    value: Any
    expires_at: float

    @classmethod
    def create(cls, value: Any, ttl: float, now: float) -> "CacheEntry":
        """Create an entry that expires ttl seconds after now."""
        return cls(value=value, expires_at=now + ttl)

    def is_fresh(self, now: float) -> bool:
        """Check whether the entry is still visible at the given time."""
        return now < self.expires_at
