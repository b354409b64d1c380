"""Synchronous mock client with caching, background sweeps, and simulated latency.

This module provides :class:`MockClient`, the primary blocking entry point
of routemock. It wraps a :class:`~routemock.resolver.ResponseResolver` and
layers on:

- **Cache ownership** -- one :class:`~routemock.cache.ResponseCache` per
  configuration load, bounded by ``globalCache.maxEntries``.
- **Background sweep** -- a :class:`~routemock.cache.CacheSweeper` thread
  purges expired entries for the lifetime of the client.
- **Simulated latency** -- routes with a non-zero delay block the caller,
  and the wait can be cut short by a cancel event or a timeout.

See Also:
    :class:`~routemock.client.async_client.AsyncMockClient` for the
    equivalent non-blocking implementation.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

from routemock.cache import DEFAULT_SWEEP_INTERVAL, CacheSweeper, ResponseCache
from routemock.exceptions import RequestCancelledError, ResolveTimeoutError
from routemock.models import MockConfig, MockResponse
from routemock.resolver import ResponseResolver

logger = logging.getLogger(__name__)


class MockClient:
    """Synchronous client resolving named routes to simulated responses.

    The sweeper thread starts on construction and is stopped by
    :meth:`close`; using the client as a context manager does both.

    Args:
        config: The validated configuration.
        cache: Optional cache to use instead of a fresh one.
        sweep_interval: Seconds between background sweeps.
        start_sweeper: Set to ``False`` to skip the background sweep thread.

    Example::

        with MockClient.from_source("routemock.json") as client:
            response = client.resolve("list-users")
            print(response.status_code, response.decode_json())
    """

    def __init__(
        self,
        config: MockConfig,
        cache: Optional[ResponseCache] = None,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL,
        start_sweeper: bool = True,
    ) -> None:
        self._resolver = ResponseResolver(config, cache)
        self._sweeper = CacheSweeper(self._resolver.cache, sweep_interval)
        if start_sweeper:
            self._sweeper.start()

    @classmethod
    def from_source(cls, source: str, **kwargs: Any) -> MockClient:
        """Load the configuration from *source* and build a client for it.

        Raises:
            ConfigLoadError: If the configuration cannot be loaded.
        """
        from routemock.config import load_config

        return cls(load_config(source), **kwargs)

    @property
    def config(self) -> MockConfig:
        return self._resolver.config

    @property
    def cache(self) -> ResponseCache:
        return self._resolver.cache

    @property
    def sweeper(self) -> CacheSweeper:
        return self._sweeper

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> MockClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Stop the background sweeper. The cache stays readable."""
        self._sweeper.stop()

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def resolve(self, route_name: str) -> MockResponse:
        """Resolve *route_name*, waiting out any simulated delay in full.

        Raises:
            RouteNotFoundError: If the route is not configured.
            EncodingError: If the response body cannot be serialised.
        """
        return self.resolve_with_cancellation(route_name)

    def resolve_with_cancellation(
        self,
        route_name: str,
        cancel: Optional[threading.Event] = None,
        timeout: Optional[float] = None,
    ) -> MockResponse:
        """Resolve *route_name* with a cancellable simulated delay.

        The response is computed, and cached when eligible, before the delay
        starts. If *cancel* is set or *timeout* elapses before the delay
        ends, the response is discarded and an error is raised instead.
        Responses served from the cache are returned without delay.

        Args:
            route_name: Name of the configured route.
            cancel: Event another thread sets to abandon the wait.
            timeout: Maximum seconds to wait for the delay.

        Raises:
            RouteNotFoundError: If the route is not configured.
            EncodingError: If the response body cannot be serialised.
            RequestCancelledError: If *cancel* was set before the delay ended.
            ResolveTimeoutError: If *timeout* elapsed before the delay ended.
        """
        response, from_cache = self._resolver.lookup(route_name)
        delay = self._resolver.route(route_name).delay_seconds
        if delay > 0 and not from_cache:
            self._simulate_delay(route_name, delay, cancel, timeout)
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
    def _simulate_delay(
        route_name: str,
        delay: float,
        cancel: Optional[threading.Event],
        timeout: Optional[float],
    ) -> None:
        event = cancel if cancel is not None else threading.Event()
        wait = delay if timeout is None else min(delay, max(timeout, 0.0))
        if event.wait(wait):
            logger.debug("Resolve of route '%s' cancelled during delay", route_name)
            raise RequestCancelledError(f"Request to route '{route_name}' was cancelled")
        if timeout is not None and timeout < delay:
            logger.debug("Resolve of route '%s' timed out after %.3fs", route_name, timeout)
            raise ResolveTimeoutError(
                f"Request to route '{route_name}' timed out after {timeout}s"
            )
