"""In-memory TTL cache.

Thread-safe mapping of key -> value with an optional per-entry TTL.
Expired entries are not removed on read, they are simply reported as a
miss and overwritten by the next set().
"""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


def make_cache_key(*parts: Any) -> str:
    """Build a cache key from parts.

    Examples:
        >>> make_cache_key("squad", 57)
        'squad:57'
    """
    return ":".join(str(p) for p in parts)


@dataclass
class _Entry:
    value: Any
    expires_at: float | None  # None = never expires


class TTLCache:
    """Key/value cache with optional expiry.

    Args:
        default_ttl: TTL in seconds used when set() gets none, None = no expiry
        clock: Monotonic time source, injectable for tests
    """

    def __init__(
        self,
        default_ttl: float | None = None,
        clock: Callable[[], float] | None = None,
    ):
        self._default_ttl = default_ttl
        self._clock = clock or time.monotonic
        self._data: dict[str, _Entry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Any | None:
        """Return the live value for key, or None on miss/expiry."""
        with self._lock:
            entry = self._data.get(key)
            if entry is None or self._is_expired(entry):
                self._misses += 1
                return None
            self._hits += 1
            return entry.value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        ttl = ttl if ttl is not None else self._default_ttl
        expires_at = self._clock() + ttl if ttl is not None else None
        with self._lock:
            self._data[key] = _Entry(value, expires_at)

    def clear(self) -> None:
        with self._lock:
            count = len(self._data)
            self._data.clear()
        if count:
            logger.debug("[CACHE] Cleared %d entries", count)

    def stats(self) -> dict:
        """Hit/miss counters and current size."""
        with self._lock:
            total = self._hits + self._misses
            return {
                "size": len(self._data),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(self._hits / total * 100, 1) if total else 0.0,
            }

    def _is_expired(self, entry: _Entry) -> bool:
        return entry.expires_at is not None and self._clock() >= entry.expires_at

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: str) -> bool:
        """Live-entry check that leaves the hit/miss counters alone."""
        with self._lock:
            entry = self._data.get(key)
            return entry is not None and not self._is_expired(entry)
