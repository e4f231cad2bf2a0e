"""Result caches for the HTTP adapter.

One cache instance is created per application and injected into routes;
there is no module-level store. Keys are digests of the request payload,
so identical snapshots share an entry.
"""

import hashlib
import json
import logging
import time
from typing import Any, Callable, Protocol, runtime_checkable

import redis.asyncio as redis

logger = logging.getLogger(__name__)


def cache_key(prefix: str, payload: dict[str, Any]) -> str:
    """Generate a deterministic cache key from a JSON-able payload."""
    raw = json.dumps(payload, sort_keys=True, default=str)
    h = hashlib.sha256(raw.encode()).hexdigest()[:16]
    return f"finhealth:{prefix}:{h}"


@runtime_checkable
class ResultCache(Protocol):
    async def get(self, key: str) -> dict | None:
        """Return the cached value, or None on miss or expiry."""
        ...

    async def set(self, key: str, value: dict, ttl_seconds: int) -> None:
        """Store a value for ttl_seconds."""
        ...


class MemoryCache:
    """In-process TTL cache. Per worker; use RedisCache to share across workers."""

    def __init__(self, clock: Callable[[], float] = time.monotonic, max_entries: int = 1024):
        self._clock = clock
        self._max_entries = max_entries
        self._entries: dict[str, tuple[float, dict]] = {}

    async def get(self, key: str) -> dict | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if expires_at <= self._clock():
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: dict, ttl_seconds: int) -> None:
        if len(self._entries) >= self._max_entries:
            self._evict()
        self._entries[key] = (self._clock() + ttl_seconds, value)

    def _evict(self) -> None:
        now = self._clock()
        expired = [k for k, (exp, _) in self._entries.items() if exp <= now]
        for k in expired:
            del self._entries[k]
        if len(self._entries) >= self._max_entries:
            # Oldest insertion first
            del self._entries[next(iter(self._entries))]


class RedisCache:
    """Redis-backed cache. Redis outages degrade to cache misses."""

    def __init__(self, url: str):
        self._client = redis.from_url(url, decode_responses=True)

    async def get(self, key: str) -> dict | None:
        try:
            cached_value = await self._client.get(key)
        except redis.RedisError:
            logger.warning("Redis unavailable, skipping cache for %s", key)
            return None
        if cached_value is None:
            return None
        logger.debug("Cache hit: %s", key)
        return json.loads(cached_value)

    async def set(self, key: str, value: dict, ttl_seconds: int) -> None:
        try:
            await self._client.setex(key, ttl_seconds, json.dumps(value, default=str))
        except redis.RedisError:
            logger.warning("Failed to write cache for %s", key)
