"""In-memory response caching for routemock.

This package provides :class:`ResponseCache`, a thread-safe TTL cache with
an optional capacity bound and oldest-first eviction, and the background
sweepers that purge expired entries from it.

The cache is owned by a :class:`~routemock.resolver.ResponseResolver` and is
controlled by the ``globalCache`` and per-route ``cache`` sections of the
configuration (:class:`~routemock.models.CachePolicy`).
"""

from routemock.cache.cache import CacheEntry, ResponseCache
from routemock.cache.sweeper import (
    DEFAULT_SWEEP_INTERVAL,
    AsyncCacheSweeper,
    CacheSweeper,
)

__all__ = [
    "AsyncCacheSweeper",
    "CacheEntry",
    "CacheSweeper",
    "DEFAULT_SWEEP_INTERVAL",
    "ResponseCache",
]
