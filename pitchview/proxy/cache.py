"""Response cache for the forwarding proxy.

Keyed by the fully resolved upstream URL. Owned by the application for the
lifetime of the process and handed to the route handler, never a module
global.

Policy:
- Unbounded: no eviction, one entry per distinct URL
- Stale entries stay in the mapping and are treated as a miss
- Only successful upstream responses are written (write-through)
"""

import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass

from pitchview.utilities.cache import TTLCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """A cached upstream response."""

    body: bytes
    status: int
    content_type: str
    expires_at: float

    def remaining(self, now: float) -> float:
        """Seconds of freshness left (never negative)."""
        return max(0.0, self.expires_at - now)


class ResponseCache:
    """URL -> CacheEntry mapping with a fixed TTL, stored in a TTLCache."""

    def __init__(self, ttl: float = 60.0, clock: Callable[[], float] | None = None):
        self.ttl = ttl
        self._clock = clock or time.monotonic
        self._cache = TTLCache(default_ttl=ttl, clock=self._clock)

    def get(self, url: str) -> CacheEntry | None:
        """Return a live entry for url, or None if missing or stale."""
        entry = self._cache.get(url)
        logger.debug("[CACHE] %s %s", "HIT" if entry is not None else "MISS", url)
        return entry

    def put(
        self,
        url: str,
        body: bytes,
        status: int,
        content_type: str,
    ) -> CacheEntry:
        """Store a response, replacing any previous (possibly stale) entry."""
        entry = CacheEntry(
            body=body,
            status=status,
            content_type=content_type,
            expires_at=self._clock() + self.ttl,
        )
        self._cache.set(url, entry)
        return entry

    def max_age(self, entry: CacheEntry) -> int:
        """Whole seconds of freshness left, for a Cache-Control max-age."""
        return math.ceil(entry.remaining(self._clock()))

    def stats(self) -> dict:
        stats = self._cache.stats()
        return {
            "size": stats["size"],
            "ttl": self.ttl,
            "hits": stats["hits"],
            "misses": stats["misses"],
        }

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, url: str) -> bool:
        return url in self._cache
