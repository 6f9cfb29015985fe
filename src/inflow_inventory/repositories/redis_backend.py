"""Redis implementation of CacheBackend.

Lets cached inventory data survive between CLI invocations and be shared by
several processes. Namespacing is handled by CacheStore, so several caches
can safely share one Redis database.
"""

import json
import math
import re
import time
from collections.abc import Callable

import redis

from inflow_inventory.config import get_redis_client
from inflow_inventory.entities import CacheEntry
from inflow_inventory.logging_config import get_logger

logger = get_logger(__name__)

_GLOB_SPECIALS = re.compile(r"([*?\[\]\\])")


class RedisCacheBackend:
    """Redis-backed CacheBackend.

    This class satisfies the CacheBackend protocol through structural
    typing - no explicit inheritance needed.

    Each entry is stored as a JSON string {"value": ..., "expires_at": ...}.
    Redis expiry is set as well so stale keys are reclaimed, but freshness
    is always decided by CacheStore from expires_at.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the Redis cache backend.

        Args:
            redis_client: Redis client instance. If None, creates default.
            clock: Time source used to compute the Redis expiry.
        """
        self._client = redis_client or get_redis_client()
        self._clock = clock

    @classmethod
    def create(cls, redis_client: redis.Redis | None = None) -> "RedisCacheBackend":
        """Factory method to create RedisCacheBackend with defaults.

        Args:
            redis_client: Redis client. If None, built from settings.

        Returns:
            Configured RedisCacheBackend
        """
        return cls(redis_client=redis_client)

    def get(self, key: str) -> CacheEntry | None:
        raw = self._client.get(key)
        if raw is None:
            return None

        try:
            payload = json.loads(raw)
            return CacheEntry(value=payload["value"], expires_at=float(payload["expires_at"]))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError):
            # Foreign or corrupt value under our key: treat as absent
            logger.warning("Discarding unreadable cache entry", key=key)
            self._client.delete(key)
            return None

    def set(self, key: str, entry: CacheEntry) -> None:
        payload = json.dumps({"value": entry.value, "expires_at": entry.expires_at}, default=str)
        remaining_ms = math.ceil((entry.expires_at - self._clock()) * 1000)
        self._client.set(key, payload, px=max(1, remaining_ms))

    def delete(self, key: str) -> bool:
        result: int = self._client.delete(key)  # type: ignore[assignment]
        return result > 0

    def keys(self, prefix: str) -> list[str]:
        pattern = _GLOB_SPECIALS.sub(r"\\\1", prefix) + "*"
        found = []
        for key in self._client.scan_iter(match=pattern):
            if isinstance(key, bytes):
                key = key.decode()
            if key.startswith(prefix):
                found.append(key)
        return found

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
