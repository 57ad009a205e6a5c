"""In-process TTL cache for settings and site statistics.

Provides fast access to:
- The site settings map
- Public statistics
"""

import time
from typing import Any, Awaitable, Callable, Optional

from loguru import logger

# Key prefixes
PREFIX_SETTINGS = "settings:"
PREFIX_STATS = "stats:"


class CacheManager:
    """In-memory cache with per-key expiry."""

    def __init__(self):
        self._memory_cache: dict[str, tuple[Any, float]] = {}

    async def get(self, key: str) -> Optional[Any]:
        """Get a cached value, or None if missing or expired."""
        entry = self._memory_cache.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if time.monotonic() >= expires_at:
            del self._memory_cache[key]
            return None
        return value

    async def set(self, key: str, value: Any, ttl: int = 60) -> None:
        """Set a cache value with TTL in seconds."""
        self._memory_cache[key] = (value, time.monotonic() + ttl)

    async def delete(self, key: str) -> None:
        self._memory_cache.pop(key, None)

    async def invalidate_prefix(self, prefix: str) -> int:
        """Drop every key starting with ``prefix``."""
        keys = [k for k in self._memory_cache if k.startswith(prefix)]
        for key in keys:
            del self._memory_cache[key]
        if keys:
            logger.debug(f"Invalidated {len(keys)} cache entries for '{prefix}'")
        return len(keys)

    async def get_or_set(
        self,
        key: str,
        factory: Callable[[], Awaitable[Any]],
        ttl: int = 60,
    ) -> Any:
        """Return the cached value, computing and storing it on a miss."""
        value = await self.get(key)
        if value is not None:
            return value
        value = await factory()
        await self.set(key, value, ttl)
        return value

    def clear(self) -> None:
        self._memory_cache.clear()


# Global cache instance
cache_manager = CacheManager()
