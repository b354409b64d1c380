"""Turns a route name into a :class:`~routemock.models.MockResponse`.

:class:`ResponseResolver` implements the response-resolution policy shared
by the sync and async clients:

1. Look up the route (unknown names raise
   :class:`~routemock.exceptions.RouteNotFoundError` without touching the
   cache).
2. Pick the effective cache policy: the route's own policy when it is
   enabled, the global policy otherwise.
3. For cacheable ``GET`` routes, serve a copy of a live cache hit.
4. Otherwise pick a response template: the route's explicit
   ``expectedResponse``, else the route's ``defaultResponses``, else the
   global defaults, else the global ``2xx`` entry.
5. Encode the body as canonical JSON and build case-insensitive headers.
6. Store successful cacheable ``GET`` responses, stamping ``cached_at``
   first so the stored and returned copies are equal.

Simulated latency is not handled here; it belongs to the clients, which
apply it after this step.
"""

from __future__ import annotations

import copy
import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

import httpx

from routemock.cache import ResponseCache
from routemock.exceptions import EncodingError, RouteNotFoundError
from routemock.models import (
    DEFAULT_RESPONSES,
    SUCCESS_CLASS,
    CachePolicy,
    MockConfig,
    MockResponse,
    ResponseSpec,
    RouteExpectation,
)

logger = logging.getLogger(__name__)

KEY_SEPARATOR = "_"
CACHEABLE_METHOD = "GET"
TARGET_STATUS = 200


def encode_body(body: Any) -> bytes:
    """Serialise *body* to canonical JSON bytes.

    Keys are sorted and separators compact so equal values always encode to
    equal bytes. ``None`` encodes to an empty body.

    Raises:
        EncodingError: If *body* is not JSON-serialisable (including NaN
            and infinities).
    """
    if body is None:
        return b""
    try:
        return json.dumps(
            body, sort_keys=True, separators=(",", ":"), allow_nan=False
        ).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise EncodingError(f"Cannot encode response body: {exc}") from exc


def route_prefix(route_name: str) -> str:
    """Return the prefix shared by every cache key of *route_name*."""
    return f"{route_name}{KEY_SEPARATOR}"


def cache_key(route_name: str, route: RouteExpectation) -> str:
    """Derive the cache key identifying equivalent requests to *route*.

    The key is ``name_METHOD_path``, followed by the canonical JSON of the
    query parameters when there are any, followed by the canonical JSON of
    the request body for non-GET routes that declare one.
    """
    key = KEY_SEPARATOR.join((route_name, route.method, route.path))
    if route.query_params:
        key += encode_body(route.query_params).decode("utf-8")
    if route.body is not None and route.method != CACHEABLE_METHOD:
        key += encode_body(route.body).decode("utf-8")
    return key


def _status_keys(status_code: int) -> tuple[str, str]:
    return str(status_code), f"{status_code // 100}xx"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ResponseResolver:
    """Resolves named routes against a configuration, backed by a cache.

    The resolver holds no locks of its own; all shared state lives in the
    :class:`~routemock.cache.ResponseCache`.

    Args:
        config: The validated configuration.
        cache: Cache to use. Defaults to a new cache bounded by
            ``config.global_cache.max_entries``.
    """

    def __init__(self, config: MockConfig, cache: Optional[ResponseCache] = None) -> None:
        self._config = config
        self._cache = cache if cache is not None else ResponseCache(
            max_entries=config.global_cache.max_entries
        )

    @property
    def config(self) -> MockConfig:
        return self._config

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    def route(self, route_name: str) -> RouteExpectation:
        """Return the configuration of *route_name*.

        Raises:
            RouteNotFoundError: If the route is not configured.
        """
        try:
            return self._config.routes[route_name]
        except KeyError:
            raise RouteNotFoundError(route_name) from None

    def effective_policy(self, route: RouteExpectation) -> CachePolicy:
        return route.cache if route.cache.enabled else self._config.global_cache

    def resolve(self, route_name: str) -> MockResponse:
        """Produce the response for *route_name*, using the cache when allowed.

        Raises:
            RouteNotFoundError: If the route is not configured.
            EncodingError: If the selected body cannot be serialised.
        """
        return self.lookup(route_name)[0]

    def lookup(self, route_name: str) -> tuple[MockResponse, bool]:
        """Like :meth:`resolve`, also reporting whether the cache served the response."""
        route = self.route(route_name)
        policy = self.effective_policy(route)
        cacheable = policy.enabled and route.method == CACHEABLE_METHOD

        key: Optional[str] = None
        if cacheable:
            key = cache_key(route_name, route)
            cached, found = self._cache.get(key)
            if found:
                logger.debug("Cache hit for route '%s'", route_name)
                return cached.model_copy(deep=True), True
            logger.debug("Cache miss for route '%s'", route_name)

        response = self._build_response(self.select_response(route))

        if key is not None and response.is_success:
            response = response.model_copy(update={"cached_at": _utcnow()})
            self._cache.set(key, response, policy.effective_ttl)
            logger.debug(
                "Cached route '%s' for %ds", route_name, policy.effective_ttl
            )
            response = response.model_copy(deep=True)
        return response, False

    def select_response(self, route: RouteExpectation) -> ResponseSpec:
        """Choose the response template for *route*.

        An explicit ``expected_response`` wins. Otherwise the target status
        is looked up by exact code, then by class, first in the route's
        ``default_responses`` and then in the global defaults. The global
        ``2xx`` entry is the last resort, falling back to the built-in one
        if the configuration replaced the global table without it.
        """
        if route.expected_response is not None:
            return route.expected_response

        global_defaults = self._config.global_defaults or {}
        for table in (route.default_responses, global_defaults):
            for status_key in _status_keys(TARGET_STATUS):
                if status_key in table:
                    return table[status_key]
        return global_defaults.get(SUCCESS_CLASS, DEFAULT_RESPONSES[SUCCESS_CLASS])

    def invalidate_all(self) -> None:
        """Drop every cached response."""
        self._cache.clear()
        logger.debug("Cache cleared")

    def invalidate_route(self, route_name: str) -> int:
        """Drop every cached response of *route_name*.

        Returns:
            The number of entries removed.
        """
        prefix = route_prefix(route_name)
        removed = self._cache.remove_matching(lambda key: key.startswith(prefix))
        logger.debug("Invalidated %d cache entries for route '%s'", removed, route_name)
        return removed

    @staticmethod
    def _build_response(spec: ResponseSpec) -> MockResponse:
        headers = httpx.Headers()
        for name, value in spec.headers.items():
            headers[name] = value
        return MockResponse(
            status_code=spec.status_code,
            headers=headers,
            raw_body=encode_body(spec.body),
            parsed_body=copy.deepcopy(spec.body),
            content_type=headers.get("content-type", ""),
        )
