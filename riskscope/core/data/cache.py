"""
Thread-safe TTL cache shared by all lookups.

Keys are namespaced by lookup kind ("ticker:", "overview:", "financials:",
"price:") so different entity types never collide. Entries expire only by
TTL; there is no LRU eviction because capacity is bounded by request volume.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from riskscope.config import config

logger = logging.getLogger(__name__)

CACHE_NAMESPACES = ("ticker", "overview", "financials", "price")


def cache_key(kind: str, ident: str) -> str:
    """
    Build a namespaced cache key.

    Args:
        kind: One of CACHE_NAMESPACES
        ident: Normalized identifier (input text or ticker)

    Raises:
        ValueError: If kind is not a known namespace
    """
    if kind not in CACHE_NAMESPACES:
        raise ValueError(f"Unknown cache namespace: {kind}")
    return f"{kind}:{ident}"


@dataclass
class _Entry:
    value: Any
    expires_at: float


class TTLCache:
    """
    In-memory key/value store with per-entry expiry.

    All operations hold a single lock, so concurrent get/set calls never
    observe a partially written entry.

    Usage:
        cache = TTLCache(default_ttl=300)
        cache.set(cache_key("price", "AAPL"), snapshot)
        snapshot = cache.get(cache_key("price", "AAPL"))
    """

    def __init__(
        self,
        default_ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.default_ttl = default_ttl if default_ttl is not None else config.cache_ttl_seconds
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None if absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None
            if self._clock() >= entry.expires_at:
                del self._entries[key]
                self._misses += 1
                logger.debug(f"Cache entry expired: {key}")
                return None
            self._hits += 1
            return entry.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store a value for ttl seconds (default TTL when omitted)."""
        ttl = self.default_ttl if ttl is None else ttl
        with self._lock:
            self._entries[key] = _Entry(value=value, expires_at=self._clock() + ttl)

    def delete(self, key: str) -> None:
        """Remove a key if present."""
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        """Remove all entries and reset statistics."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            self._hits = 0
            self._misses = 0
        logger.info(f"Cleared {count} cache entries")

    def purge_expired(self) -> int:
        """Drop expired entries and return how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [k for k, e in self._entries.items() if now >= e.expires_at]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and self._clock() < entry.expires_at

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for e in self._entries.values() if now < e.expires_at)

    @property
    def stats(self) -> dict[str, int]:
        """Get cache statistics."""
        with self._lock:
            return {
                "entries": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
            }


# Process-wide instance for the CLI; library callers inject their own.
_cache: Optional[TTLCache] = None
_cache_lock = threading.Lock()


def get_cache() -> TTLCache:
    """Return the process-wide cache, creating it on first use."""
    global _cache
    with _cache_lock:
        if _cache is None:
            _cache = TTLCache()
        return _cache


def reset_cache() -> None:
    """Discard the process-wide cache (used by tests)."""
    global _cache
    with _cache_lock:
        _cache = None
