"""Short-TTL in-memory cache for assembled results."""

import asyncio
import time
from collections.abc import Callable
from typing import Any

import structlog
from cachetools import TLRUCache

log = structlog.get_logger(__name__)

_MS_PER_SECOND = 1000


def _expires_at(_key: str, entry: tuple[Any, float], now: float) -> float:
    _value, ttl_seconds = entry
    return now + ttl_seconds


class ResultCache:
    """Bounded cache with a TTL per entry.

    Values are stored as immutable snapshots and returned as-is. Expired
    entries are dropped on read. Concurrent misses for the same key may
    both recompute; the last write wins.
    """

    def __init__(
        self,
        max_size: int = 1024,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize result cache.

        Args:
            max_size: Maximum number of entries (least recently used evicted).
            timer: Monotonic clock in seconds; injectable for tests.
        """
        self.max_size = max_size
        self._cache: TLRUCache = TLRUCache(maxsize=max_size, ttu=_expires_at, timer=timer)
        self._lock = asyncio.Lock()
        self._hits = 0
        self._misses = 0

    async def get(self, key: str) -> Any | None:
        """Return the cached value, or None when missing or expired."""
        async with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._misses += 1
                return None
            self._hits += 1
            return entry[0]

    async def set(self, key: str, value: Any, ttl_ms: int) -> None:
        """Store a value for ``ttl_ms`` milliseconds."""
        if ttl_ms <= 0:
            return
        async with self._lock:
            self._cache[key] = (value, ttl_ms / _MS_PER_SECOND)
        log.debug("result_cached", key=key, ttl_ms=ttl_ms)

    async def clear(self, key: str | None = None) -> None:
        """Remove one key, or everything when no key is given."""
        async with self._lock:
            if key is None:
                self._cache.clear()
                self._hits = 0
                self._misses = 0
            else:
                self._cache.pop(key, None)

    def get_stats(self) -> dict:
        """Get cache statistics.

        Returns:
            dict with cache stats
        """
        total = self._hits + self._misses
        hit_rate = self._hits / total if total > 0 else 0.0

        return {
            "size": len(self._cache),
            "max_size": self.max_size,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(hit_rate, 4),
        }
