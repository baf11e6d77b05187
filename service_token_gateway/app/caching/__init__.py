"""
Gateway caching package.

One in-process CacheStore is built at service start and shared by every
query field resolver. Entries are bounded by count (LRU) and by age (lazy
TTL); failures are never stored.
"""

from .cache_store import CacheEntry, CacheStore, DEFAULT_CAPACITY, DEFAULT_TTL_SECONDS

__all__ = [
    "CacheEntry",
    "CacheStore",
    "DEFAULT_CAPACITY",
    "DEFAULT_TTL_SECONDS",
]
