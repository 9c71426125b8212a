"""Per-key cache with in-flight request deduplication.

Used for the per-team squad and matches caches. When several callers ask
for the same key while a fetch is already running, they wait for that fetch
instead of starting their own.

clear() bumps a generation counter. A fetch that started before the clear
still hands its result to its waiters but does not write it into the cache,
so data from a previous competition never leaks into the next one.
"""

import logging
import threading
from collections.abc import Callable, Hashable
from concurrent.futures import Future
from typing import Any

from pitchview.utilities.cache import TTLCache, make_cache_key

logger = logging.getLogger(__name__)


class KeyedCache:
    """Cache of fetched values keyed by e.g. team id.

    Args:
        name: Label used in log messages
        ttl: Seconds an entry stays fresh, None = until cleared
        clock: Monotonic time source (tests)
    """

    def __init__(
        self,
        name: str,
        ttl: float | None = None,
        clock: Callable[[], float] | None = None,
    ):
        self.name = name
        self._cache = TTLCache(default_ttl=ttl, clock=clock)
        self._in_flight: dict[str, Future] = {}
        self._lock = threading.Lock()
        self._generation = 0
        self.fetch_count = 0

    def _key(self, key: Hashable) -> str:
        if isinstance(key, tuple):
            return make_cache_key(self.name, *key)
        return make_cache_key(self.name, key)

    def peek(self, key: Hashable) -> Any | None:
        """Cached value for key without fetching."""
        return self._cache.get(self._key(key))

    def get_or_fetch(self, key: Hashable, loader: Callable[[], Any]) -> Any:
        """Return the cached value for key, fetching it at most once concurrently.

        Args:
            key: Cache key (team id, or a tuple)
            loader: Called with no arguments to fetch the value on a miss

        Returns:
            Cached or freshly loaded value

        Raises:
            Whatever loader raises. Failures are not cached.
        """
        cache_key = self._key(key)
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        with self._lock:
            cached = self._cache.get(cache_key)
            if cached is not None:
                return cached
            future = self._in_flight.get(cache_key)
            owner = future is None
            if owner:
                future = Future()
                self._in_flight[cache_key] = future
                generation = self._generation

        if not owner:
            logger.debug("[CACHE] Joining in-flight fetch for %s", cache_key)
            return future.result()

        try:
            self.fetch_count += 1
            value = loader()
        except BaseException as e:
            future.set_exception(e)
            raise
        else:
            with self._lock:
                if generation == self._generation:
                    self._cache.set(cache_key, value)
                else:
                    logger.debug("[CACHE] Dropping %s fetched before last clear", cache_key)
            future.set_result(value)
            return value
        finally:
            with self._lock:
                if self._in_flight.get(cache_key) is future:
                    del self._in_flight[cache_key]

    def clear(self) -> None:
        """Drop every cached entry and detach in-flight fetches."""
        with self._lock:
            self._generation += 1
            self._cache.clear()
            self._in_flight.clear()

    def __len__(self) -> int:
        return len(self._cache)
