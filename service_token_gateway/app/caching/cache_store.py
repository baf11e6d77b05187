"""
In-process LRU cache with lazy TTL expiry.
"""

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from shared.logging import get_logger


V = TypeVar("V")

DEFAULT_CAPACITY = 100
DEFAULT_TTL_SECONDS = 15 * 60


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    """A stored value and the clock reading at which it was written."""

    key: str
    value: V
    inserted_at: float

    def is_expired(self, now: float, ttl_seconds: float) -> bool:
        return now - self.inserted_at > ttl_seconds


class CacheStore(Generic[V]):
    """
    Capacity- and age-bounded key/value store.

    Entries are kept in recency order; ``get`` hits and every ``set`` move
    the key to the most-recently-used end. When a new key would push the
    store over ``capacity`` the least-recently-used entry is evicted first.

    Expiry is lazy: an entry older than ``ttl_seconds`` is reported as a miss
    but stays in place until it is overwritten or evicted.

    All operations take an internal lock and never await, so a single
    instance can be shared by every resolver task (and thread) in the process.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")

        self.capacity = capacity
        self.ttl_seconds = ttl_seconds
        self.logger = get_logger("token_gateway.cache")

        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry[V]]" = OrderedDict()
        self._lock = threading.Lock()
        self._stats = {
            "hits": 0,
            "misses": 0,
            "expired_reads": 0,
            "evictions": 0,
        }

    def get(self, key: str) -> Optional[V]:
        """Return the live value for ``key`` or None on a miss."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._stats["misses"] += 1
                return None

            if entry.is_expired(self._clock(), self.ttl_seconds):
                self._stats["misses"] += 1
                self._stats["expired_reads"] += 1
                return None

            self._entries.move_to_end(key)
            self._stats["hits"] += 1
            return entry.value

    def set(self, key: str, value: V) -> None:
        """Insert or overwrite ``key``, evicting the LRU entry when full."""
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
            elif len(self._entries) >= self.capacity:
                evicted_key, _ = self._entries.popitem(last=False)
                self._stats["evictions"] += 1
                self.logger.debug("Evicted cache entry", key=evicted_key)

            self._entries[key] = CacheEntry(key=key, value=value, inserted_at=self._clock())

    def invalidate(self, key: str) -> bool:
        """
        Remove a specific cache entry.

        Returns:
            True if entry was found and removed
        """
        with self._lock:
            removed = self._entries.pop(key, None) is not None

        if removed:
            self.logger.info("Invalidated cache entry", key=key)
        return removed

    def clear(self) -> int:
        """
        Remove all cache entries.

        Returns:
            Number of entries cleared
        """
        with self._lock:
            count = len(self._entries)
            self._entries.clear()

        self.logger.info("Cleared cache", entries=count)
        return count

    def __contains__(self, key: object) -> bool:
        # Logical presence; does not count as an access
        with self._lock:
            entry = self._entries.get(key)  # type: ignore[arg-type]
            return entry is not None and not entry.is_expired(self._clock(), self.ttl_seconds)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            lookups = self._stats["hits"] + self._stats["misses"]
            hit_rate = (self._stats["hits"] / lookups * 100) if lookups else 0.0
            return {
                "entries": len(self._entries),
                "capacity": self.capacity,
                "ttl_seconds": self.ttl_seconds,
                "hits": self._stats["hits"],
                "misses": self._stats["misses"],
                "expired_reads": self._stats["expired_reads"],
                "evictions": self._stats["evictions"],
                "hit_rate_percent": round(hit_rate, 1),
            }
