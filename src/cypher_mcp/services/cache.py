"""
Async-safe TTL cache for expensive, rarely changing results.

Used for the schema introspection result, which requires a full
``apoc.meta.data()`` scan and only changes when data is written.
"""

import asyncio
import logging
from dataclasses import asdict, dataclass
from typing import Any, Awaitable, Callable

from cachetools import TTLCache

logger = logging.getLogger(__name__)


@dataclass
class CacheStats:
    """Cache statistics."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    invalidations: int = 0
    size: int = 0
    max_size: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["hit_rate"] = round(self.hit_rate, 3)
        return data


class CacheService:
    """
    TTL cache guarded by an asyncio lock.

    A TTL of zero disables the cache: every lookup misses and nothing is stored.
    """

    def __init__(
        self,
        max_size: int = 16,
        ttl_seconds: int = 60,
        enabled: bool = True,
    ):
        """
        Initialize cache service.

        Args:
            max_size: Maximum number of cached items
            ttl_seconds: Time-to-live for cache entries in seconds
            enabled: Whether caching is enabled
        """
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self.enabled = enabled and ttl_seconds > 0

        self._cache: TTLCache = TTLCache(maxsize=max_size, ttl=max(ttl_seconds, 1))
        self._lock = asyncio.Lock()
        self._stats = CacheStats(max_size=max_size)

        logger.debug(
            f"CacheService initialized: max_size={max_size}, ttl={ttl_seconds}s, "
            f"enabled={self.enabled}"
        )

    async def get(self, key: str) -> Any | None:
        """Return the cached value, or None if missing or expired."""
        if not self.enabled:
            return None

        async with self._lock:
            try:
                value = self._cache[key]
            except KeyError:
                self._stats.misses += 1
                logger.debug(f"Cache MISS: {key}")
                return None
            self._stats.hits += 1
            logger.debug(f"Cache HIT: {key}")
            return value

    async def set(self, key: str, value: Any) -> None:
        if not self.enabled:
            return

        async with self._lock:
            if len(self._cache) >= self.max_size and key not in self._cache:
                self._stats.evictions += 1
            self._cache[key] = value
            self._stats.size = len(self._cache)
            logger.debug(f"Cache SET: {key}")

    async def delete(self, key: str) -> None:
        if not self.enabled:
            return

        async with self._lock:
            if self._cache.pop(key, None) is not None:
                self._stats.invalidations += 1
                logger.debug(f"Cache DELETE: {key}")
            self._stats.size = len(self._cache)

    async def get_or_set(
        self,
        key: str,
        factory: Callable[[], Awaitable[Any]],
        cache_if: Callable[[Any], bool] = bool,
    ) -> Any:
        """
        Get value from cache, or compute and cache it if missing.

        Args:
            key: Cache key
            factory: Async function computing the value
            cache_if: Predicate deciding whether a computed value is stored

        Returns:
            Cached or computed value
        """
        value = await self.get(key)
        if value is not None:
            return value

        value = await factory()
        if cache_if(value):
            await self.set(key, value)
        return value

    def get_stats(self) -> CacheStats:
        """Get a snapshot of the cache statistics."""
        self._stats.size = len(self._cache)
        return CacheStats(**asdict(self._stats))
