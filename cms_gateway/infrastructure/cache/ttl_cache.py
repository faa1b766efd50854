"""In-memory TTL cache with stale-on-error fallback."""
import logging
import time
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Dict, Optional, TypeVar

from cms_gateway.middleware.monitoring import track_cache_event

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 3600


@dataclass
class CacheEntry:
    value: Any
    expires_at: float


class TTLCache:
    """
    Per-provider cache mapping string keys to values with an expiry.

    Availability wins over freshness: when a refresh fails, the last good
    value for that key is served instead of the error. The lock only guards
    the map; fetchers run outside it so different keys never wait on each
    other. Concurrent misses on the same key are not coalesced and will each
    call the fetcher. A fetch that started before a clear or invalidation
    returns its value but does not store it.
    """

    def __init__(
        self,
        ttl_seconds: Optional[int] = None,
        name: str = "cms",
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize the cache.

        Args:
            ttl_seconds: Entry lifetime in seconds (defaults to 1 hour)
            name: Cache name used in logs and metrics
            clock: Monotonic time source in seconds (injectable for tests)
        """
        self.ttl_seconds = DEFAULT_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self.name = name
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._generation = 0
        self._lock = Lock()
        self._logger = logging.getLogger(__name__)

    def get_or_fetch(self, key: str, fetcher: Callable[[], T]) -> T:
        """
        Return the cached value for ``key`` or fetch and store a new one.

        Args:
            key: Cache key
            fetcher: Zero-argument callable producing the value

        Returns:
            Fresh cached value, newly fetched value, or stale value when the
            fetcher fails

        Raises:
            Exception: Whatever the fetcher raised, if no value was ever cached
        """
        with self._lock:
            cached = self._entries.get(key)
            generation = self._generation
        if cached is not None and cached.expires_at > self._clock():
            track_cache_event(self.name, "hit")
            return cached.value

        track_cache_event(self.name, "miss")
        try:
            value = fetcher()
        except Exception as e:
            if cached is not None:
                track_cache_event(self.name, "stale")
                self._logger.warning(
                    f"Using stale cache for {key} due to fetch error: {e}"
                )
                return cached.value
            track_cache_event(self.name, "error")
            raise

        with self._lock:
            if generation != self._generation:
                self._logger.debug(f"Cache {self.name}: not storing {key}, evicted while fetching")
                return value
            self._entries[key] = CacheEntry(
                value=value,
                expires_at=self._clock() + self.ttl_seconds
            )
        return value

    def clear(self) -> None:
        """Evict every entry."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            self._generation += 1
        self._logger.info(f"Cache {self.name} cleared ({count} entries)")

    def invalidate_prefix(self, prefix: str) -> int:
        """
        Evict every entry whose key starts with ``prefix``.

        Returns:
            Number of evicted entries
        """
        with self._lock:
            keys = [key for key in self._entries if key.startswith(prefix)]
            for key in keys:
                del self._entries[key]
            self._generation += 1
        self._logger.debug(f"Cache {self.name}: evicted {len(keys)} entries with prefix {prefix!r}")
        return len(keys)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
