# core/cache.py

"""
In-memory TTL cache for permission records.

Absence is cached too: a user with no record is stored as None so that
repeated checks do not hit Supabase. Use MISS to tell "not cached" apart
from "cached as absent".
"""

from typing import Any, Optional
from datetime import datetime, timedelta
from threading import Lock
from core.logging_config import logger


MISS = object()


class CacheEntry:
    """A cached value with its expiry time."""

    def __init__(self, value: Any, ttl_seconds: int):
        self.value = value
        self.expires_at = datetime.now() + timedelta(seconds=ttl_seconds)

    def is_expired(self) -> bool:
        return datetime.now() >= self.expires_at


class RecordCache:
    """
    Thread-safe TTL cache keyed by user id.
    """

    def __init__(self):
        self._entries: dict[str, CacheEntry] = {}
        self._lock = Lock()

    def get(self, key: str) -> Any:
        """
        Get a cached value.

        Returns:
            The value (possibly None), or MISS if absent or expired
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return MISS

            if entry.is_expired():
                del self._entries[key]
                return MISS

            return entry.value

    def set(self, key: str, value: Any, ttl_seconds: int):
        if ttl_seconds <= 0:
            return
        with self._lock:
            self._entries[key] = CacheEntry(value, ttl_seconds)

    def delete(self, key: str):
        with self._lock:
            self._entries.pop(key, None)

    def clear(self):
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._entries)


# Global cache instance
_cache = RecordCache()


def cache_get(key: str) -> Any:
    value = _cache.get(key)
    if value is not MISS:
        logger.debug(f"Cache hit: {key}")
    return value


def cache_set(key: str, value: Optional[Any], ttl_seconds: int = 60):
    _cache.set(key, value, ttl_seconds)


def cache_delete(key: str):
    _cache.delete(key)


def cache_clear():
    """Clear all cache entries."""
    _cache.clear()
