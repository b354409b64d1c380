"""In-memory response cache with per-entry TTL and a capacity bound.

:class:`ResponseCache` maps opaque string keys to immutable
:class:`CacheEntry` snapshots. A read-write lock guards the whole map:
lookups share the lock, while writes, eviction, sweeps and invalidation take
it exclusively. Entries are never mutated after they are stored, so no
per-key locking is needed.

Expired entries are invisible to :meth:`ResponseCache.get` but stay in the
map until a sweep (:meth:`ResponseCache.clean_expired_entries`, normally
driven by :class:`~routemock.cache.sweeper.CacheSweeper`) or an eviction
removes them.

When ``max_entries`` is positive, every :meth:`ResponseCache.set` that finds
the map at or above capacity evicts exactly one entry first: the one with
the oldest ``created_at``.
"""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """A stored value with its creation and expiry timestamps (clock seconds)."""

    value: Any
    created_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return self.expires_at <= now


class _ReadWriteLock:
    """Many concurrent readers or one writer.

    Waiting writers block new readers so a steady stream of lookups cannot
    starve a sweep.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class ResponseCache:
    """Thread-safe key/value cache with TTL expiry and oldest-first eviction.

    Args:
        max_entries: Capacity bound. ``None`` or ``0`` means unbounded.
        clock: Callable returning the current time in seconds. Defaults to
            :func:`time.monotonic`; tests pass a fake clock.

    Example::

        cache = ResponseCache(max_entries=100)
        cache.set("users_GET_/users", response, ttl=300)
        value, found = cache.get("users_GET_/users")
    """

    def __init__(
        self,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries is not None and max_entries < 0:
            raise ValueError("max_entries must be >= 0")
        self._entries: dict[str, CacheEntry] = {}
        self._max_entries = max_entries or None
        self._clock = clock
        self._lock = _ReadWriteLock()

    @property
    def max_entries(self) -> Optional[int]:
        return self._max_entries

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        """True if *key* is stored, expired or not."""
        with self._lock.read():
            return key in self._entries

    def get(self, key: str) -> tuple[Any, bool]:
        """Look up *key*.

        Returns:
            ``(value, True)`` on a live hit, ``(None, False)`` if the key is
            absent or its entry has expired. Expired entries are not removed.
        """
        with self._lock.read():
            entry = self._entries.get(key)
        if entry is None or entry.is_expired(self._clock()):
            return None, False
        return entry.value, True

    def set(self, key: str, value: Any, ttl: float) -> None:
        """Store *value* under *key* for *ttl* seconds.

        If the cache is bounded and already holds ``max_entries`` entries,
        the oldest entry is evicted before the write. Occupancy is checked
        before the upsert, so overwriting an existing key at capacity still
        evicts the oldest entry, which may be a different key.
        """
        with self._lock.write():
            if self._max_entries and len(self._entries) >= self._max_entries:
                self._evict_oldest()
            now = self._clock()
            self._entries[key] = CacheEntry(
                value=value, created_at=now, expires_at=now + ttl
            )

    def clean_expired_entries(self) -> int:
        """Delete every entry whose expiry is at or before now.

        Returns:
            The number of entries removed.
        """
        with self._lock.write():
            now = self._clock()
            expired = [k for k, e in self._entries.items() if e.is_expired(now)]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("Swept %d expired cache entries", len(expired))
        return len(expired)

    def clear(self) -> None:
        """Remove all entries."""
        with self._lock.write():
            self._entries = {}

    def remove_matching(self, predicate: Callable[[str], bool]) -> int:
        """Remove every entry whose key satisfies *predicate*.

        Returns:
            The number of entries removed.
        """
        with self._lock.write():
            doomed = [k for k in self._entries if predicate(k)]
            for key in doomed:
                del self._entries[key]
        return len(doomed)

    def stats(self) -> dict[str, Any]:
        """Return ``size`` and ``max_entries`` (``None`` when unbounded)."""
        with self._lock.read():
            size = len(self._entries)
        return {"size": size, "max_entries": self._max_entries}

    def _evict_oldest(self) -> None:
        # Caller holds the write lock. Strict "<" keeps the first of equal
        # timestamps in insertion order.
        oldest_key: Optional[str] = None
        oldest_time = 0.0
        for key, entry in self._entries.items():
            if oldest_key is None or entry.created_at < oldest_time:
                oldest_key = key
                oldest_time = entry.created_at
        if oldest_key is not None:
            del self._entries[oldest_key]
            logger.debug("Evicted cache entry %s", oldest_key)
