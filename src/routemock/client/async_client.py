"""Asynchronous mock client -- mirrors :class:`~routemock.client.sync_client.MockClient` API.

This module provides :class:`AsyncMockClient`, the non-blocking counterpart
to :class:`~routemock.client.sync_client.MockClient`. Resolution and caching
are shared through :class:`~routemock.resolver.ResponseResolver`; the
simulated delay uses :func:`asyncio.sleep` raced against an
:class:`asyncio.Event` and an optional timeout, and the cache sweep runs as
an :class:`~routemock.cache.AsyncCacheSweeper` task.

Cancelling the awaiting task itself propagates :class:`asyncio.CancelledError`
as usual.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from routemock.cache import DEFAULT_SWEEP_INTERVAL, AsyncCacheSweeper, ResponseCache
from routemock.exceptions import RequestCancelledError, ResolveTimeoutError
from routemock.models import MockConfig, MockResponse
from routemock.resolver import ResponseResolver

logger = logging.getLogger(__name__)


class AsyncMockClient:
    """Asynchronous client resolving named routes to simulated responses.

    Must be used as an async context manager (or closed with
    :meth:`aclose`) so the sweep task is started and stopped with the
    client.

    Args:
        config: The validated configuration.
        cache: Optional cache to use instead of a fresh one.
        sweep_interval: Seconds between background sweeps.

    Example::

        async with AsyncMockClient(config) as client:
            response = await client.resolve_with_cancellation("slow-route", timeout=0.5)
    """

    def __init__(
        self,
        config: MockConfig,
        cache: Optional[ResponseCache] = None,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL,
    ) -> None:
        self._resolver = ResponseResolver(config, cache)
        self._sweeper = AsyncCacheSweeper(self._resolver.cache, sweep_interval)

    @classmethod
    def from_source(cls, source: str, **kwargs: Any) -> AsyncMockClient:
        """Load the configuration from *source* and build a client for it."""
        from routemock.config import load_config

        return cls(load_config(source), **kwargs)

    @property
    def config(self) -> MockConfig:
        return self._resolver.config

    @property
    def cache(self) -> ResponseCache:
        return self._resolver.cache

    @property
    def sweeper(self) -> AsyncCacheSweeper:
        return self._sweeper

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> AsyncMockClient:
        self._sweeper.start()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._sweeper.stop()

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    async def resolve(self, route_name: str) -> MockResponse:
        """Resolve *route_name*, waiting out any simulated delay in full."""
        return await self.resolve_with_cancellation(route_name)

    async def resolve_with_cancellation(
        self,
        route_name: str,
        cancel: Optional[asyncio.Event] = None,
        timeout: Optional[float] = None,
    ) -> MockResponse:
        """Resolve *route_name* with a cancellable simulated delay.

        Behaves identically to
        :meth:`~routemock.client.sync_client.MockClient.resolve_with_cancellation`
        but awaits the delay instead of blocking.

        Raises:
            RouteNotFoundError: If the route is not configured.
            EncodingError: If the response body cannot be serialised.
            RequestCancelledError: If *cancel* was set before the delay ended.
            ResolveTimeoutError: If *timeout* elapsed before the delay ended.
        """
        response, from_cache = self._resolver.lookup(route_name)
        delay = self._resolver.route(route_name).delay_seconds
        if delay > 0 and not from_cache:
            try:
                await asyncio.wait_for(self._simulate_delay(route_name, delay, cancel), timeout)
            except asyncio.TimeoutError:
                logger.debug("Resolve of route '%s' timed out after %.3fs", route_name, timeout)
                raise ResolveTimeoutError(
                    f"Request to route '{route_name}' timed out after {timeout}s"
                ) from None
        return response

    def invalidate_all(self) -> None:
        """Remove every entry from the cache."""
        self._resolver.invalidate_all()

    def invalidate_route(self, route_name: str) -> int:
        """Remove every cached response of *route_name*; returns the count."""
        return self._resolver.invalidate_route(route_name)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    async def _simulate_delay(
        route_name: str, delay: float, cancel: Optional[asyncio.Event]
    ) -> None:
        if cancel is None:
            await asyncio.sleep(delay)
            return

        sleeper = asyncio.ensure_future(asyncio.sleep(delay))
        waiter = asyncio.ensure_future(cancel.wait())
        try:
            await asyncio.wait({sleeper, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            sleeper.cancel()
            waiter.cancel()
        if cancel.is_set():
            logger.debug("Resolve of route '%s' cancelled during delay", route_name)
            raise RequestCancelledError(f"Request to route '{route_name}' was cancelled")
