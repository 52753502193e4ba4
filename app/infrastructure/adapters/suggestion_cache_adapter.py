"""
Suggestion Cache Adapter

In-memory, bounded, time-expiring cache for typeahead provider results.
"""

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, TypeVar
import structlog

from app.domain.interfaces import ISuggestionCache

logger = structlog.get_logger(__name__)

T = TypeVar("T")

DEFAULT_MAX_AGE_MS = 5 * 60 * 1000
DEFAULT_MAX_ENTRIES = 100


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass
class CacheEntry(Generic[T]):
    """Cached provider result with the time it was stored (ms)."""
    data: T
    stored_at: float


class SuggestionCache(ISuggestionCache[T]):
    """
    Memoizes suggestion-provider results by normalized query.

    Entries expire once their age exceeds ``max_age_ms``. When the cache is
    full, inserting a new key evicts the oldest-inserted entry (insertion
    order, not LRU). All operations hold an internal lock, so one instance
    may be shared across threads.
    """

    def __init__(
        self,
        max_age_ms: int = DEFAULT_MAX_AGE_MS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Optional[Callable[[], float]] = None
    ):
        if max_entries <= 0:
            raise ValueError("max_entries must be greater than zero")
        if max_age_ms < 0:
            raise ValueError("max_age_ms must not be negative")

        self.max_age_ms = max_age_ms
        self.max_entries = max_entries
        self._clock = clock or _monotonic_ms
        self._entries: "OrderedDict[str, CacheEntry[T]]" = OrderedDict()
        self._lock = threading.RLock()
        self._stats = {
            "hits": 0,
            "misses": 0,
            "evictions": 0
        }

    def get(self, key: str) -> Optional[T]:
        """Get cached data, evicting the entry if it has expired."""
        with self._lock:
            entry = self._entries.get(key)

            if entry is None:
                self._stats["misses"] += 1
                logger.debug("Suggestion cache miss", key=key)
                return None

            if self._is_expired(entry):
                del self._entries[key]
                self._stats["misses"] += 1
                logger.debug("Suggestion cache entry expired", key=key)
                return None

            self._stats["hits"] += 1
            logger.debug("Suggestion cache hit", key=key)
            return entry.data

    def set(self, key: str, data: T) -> None:
        """Store data with a fresh timestamp, evicting the oldest entry when full."""
        with self._lock:
            # Overwriting keeps the key's original position in eviction order
            if key not in self._entries and len(self._entries) >= self.max_entries:
                self._evict_oldest()

            self._entries[key] = CacheEntry(data=data, stored_at=self._clock())

    def has(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False

            if self._is_expired(entry):
                del self._entries[key]
                return False

            return True

    def clear(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            for name in self._stats:
                self._stats[name] = 0
            logger.debug("Suggestion cache cleared", count=count)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics"""
        with self._lock:
            lookups = self._stats["hits"] + self._stats["misses"]
            return {
                **self._stats,
                "size": len(self._entries),
                "max_entries": self.max_entries,
                "hit_rate": self._stats["hits"] / max(1, lookups)
            }

    @property
    def stats(self) -> Dict[str, Any]:
        return self.get_stats()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    def _is_expired(self, entry: CacheEntry[T]) -> bool:
        return self._clock() - entry.stored_at > self.max_age_ms

    def _evict_oldest(self) -> None:
        oldest_key, _ = self._entries.popitem(last=False)
        self._stats["evictions"] += 1
        logger.debug("Suggestion cache eviction", key=oldest_key)
