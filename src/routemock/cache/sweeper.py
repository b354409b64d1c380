"""Background sweeps that purge expired entries from a :class:`ResponseCache`.

Two flavours share the same contract: run
:meth:`~routemock.cache.cache.ResponseCache.clean_expired_entries` every
``interval`` seconds until stopped.

* :class:`CacheSweeper` -- a daemon thread woken early by a
  :class:`threading.Event` on :meth:`~CacheSweeper.stop`. Used by
  :class:`~routemock.client.sync_client.MockClient`.
* :class:`AsyncCacheSweeper` -- an :class:`asyncio.Task` cancelled on
  :meth:`~AsyncCacheSweeper.stop`. Used by
  :class:`~routemock.client.async_client.AsyncMockClient`.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Optional

from routemock.cache.cache import ResponseCache

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL = 300.0
"""Seconds between sweeps (five minutes)."""


class CacheSweeper:
    """Periodically sweeps a cache from a daemon thread.

    Args:
        cache: The cache to sweep.
        interval: Seconds between sweeps.

    Example::

        with CacheSweeper(cache, interval=60):
            ...  # expired entries are purged every minute
    """

    def __init__(self, cache: ResponseCache, interval: float = DEFAULT_SWEEP_INTERVAL) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._cache = cache
        self._interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the sweep thread. Calling it on a running sweeper is a no-op."""
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="routemock-cache-sweeper", daemon=True
        )
        self._thread.start()
        logger.debug("Cache sweeper started (interval %.1fs)", self._interval)

    def stop(self, timeout: Optional[float] = None) -> None:
        """Signal the thread to exit and wait for it."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
            logger.debug("Cache sweeper stopped")

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            self._cache.clean_expired_entries()

    def __enter__(self) -> CacheSweeper:
        self.start()
        return self

    def __exit__(self, *args: object) -> None:
        self.stop()


class AsyncCacheSweeper:
    """Periodically sweeps a cache from an asyncio task.

    :meth:`start` must be called from inside a running event loop.
    """

    def __init__(self, cache: ResponseCache, interval: float = DEFAULT_SWEEP_INTERVAL) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._cache = cache
        self._interval = interval
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.debug("Async cache sweeper started (interval %.1fs)", self._interval)

    async def stop(self) -> None:
        """Cancel the sweep task and wait until it has finished."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Async cache sweeper stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self._cache.clean_expired_entries()
