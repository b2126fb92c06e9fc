"""
Simple in-memory cache for upstream responses

Process-lifetime only; nothing is written to disk. The lock guards the
dictionary, it does not serialise fetches: two callers that both observe a
miss will both fetch and the last ``set`` wins.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CacheEntry:
    """Single cache entry with TTL"""

    def __init__(self, value: Any, ttl_seconds: int):
        self.value = value
        self.expires_at = utc_now() + timedelta(seconds=ttl_seconds)

    def is_expired(self) -> bool:
        return utc_now() >= self.expires_at


class SimpleCache:
    """In-memory cache with per-entry TTL, safe for concurrent asyncio use"""

    def __init__(self):
        self._cache: Dict[str, CacheEntry] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[Any]:
        """Get value from cache if not expired; expired entries are evicted"""
        async with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None

            if entry.is_expired():
                del self._cache[key]
                return None

            return entry.value

    async def set(self, key: str, value: Any, ttl_seconds: int) -> datetime:
        """Set value in cache with TTL, returning the expiry instant"""
        entry = CacheEntry(value, ttl_seconds)
        async with self._lock:
            self._cache[key] = entry
        return entry.expires_at
