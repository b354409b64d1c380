"""Canonical Pydantic models shared across all routemock modules.

This is the single source of truth for data shapes in the project. The models
fall into two groups:

**Configuration models** -- validated from the JSON/YAML configuration
document by :func:`~routemock.config.load_config`:
    :class:`CachePolicy`, :class:`ResponseSpec`, :class:`RouteExpectation`,
    and :class:`MockConfig`.

**Resolver output** -- produced by
:class:`~routemock.resolver.ResponseResolver`:
    :class:`MockResponse`.

Configuration models accept both the camelCase keys used in configuration
documents (``statusCode``, ``queryParams``, ``expectedResponse``...) and the
snake_case field names, so tests and library callers can build them directly
in Python.
"""

from __future__ import annotations

import copy
import json
from datetime import datetime
from typing import Any, Optional

import httpx
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

DEFAULT_TTL_SECONDS = 300
"""TTL applied when a cache policy leaves ``ttl`` at zero."""

SUCCESS_CLASS = "2xx"
"""Status class key of the generic success response."""


class _ConfigModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Configuration models ---


class CachePolicy(_ConfigModel):
    """Caching behaviour for a route or for the whole configuration.

    A route-level policy only takes effect when its ``enabled`` flag is set;
    otherwise the global policy governs. ``max_entries`` is read from the
    global policy only, since every route shares one cache.
    """

    enabled: bool = Field(default=False, description="Cache successful GET responses")
    ttl_seconds: int = Field(
        default=DEFAULT_TTL_SECONDS,
        ge=0,
        validation_alias=AliasChoices("ttl", "ttlSeconds", "ttl_seconds"),
        description="Entry lifetime in seconds; 0 means the default TTL",
    )
    max_entries: int = Field(
        default=0, ge=0, description="Capacity bound; 0 means unbounded"
    )

    @property
    def effective_ttl(self) -> int:
        """TTL in seconds with the zero-means-default rule applied."""
        return self.ttl_seconds or DEFAULT_TTL_SECONDS


class ResponseSpec(_ConfigModel):
    """A response template: status code, headers, and a structured body."""

    status_code: int = Field(default=200, ge=100, le=599)
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any = None


class RouteExpectation(_ConfigModel):
    """One named route of the configuration.

    Example::

        RouteExpectation(
            method="GET",
            path="/users",
            expected_response=ResponseSpec(body={"users": []}),
            cache=CachePolicy(enabled=True, ttl_seconds=60),
        )
    """

    method: str = "GET"
    path: str = "/"
    headers: dict[str, str] = Field(default_factory=dict)
    query_params: dict[str, str] = Field(default_factory=dict)
    body: Any = None
    delay_seconds: float = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("timeout", "delay", "delaySeconds", "delay_seconds"),
        description="Simulated latency before the response is returned",
    )
    expected_response: Optional[ResponseSpec] = None
    default_responses: dict[str, ResponseSpec] = Field(default_factory=dict)
    cache: CachePolicy = Field(default_factory=CachePolicy)

    @field_validator("method")
    @classmethod
    def _upper_method(cls, value: str) -> str:
        return value.upper()


class MockConfig(_ConfigModel):
    """Top-level configuration consumed by the resolver.

    When ``globalDefaults`` is absent the built-in :data:`DEFAULT_RESPONSES`
    table is used. A global TTL of zero is replaced by
    :data:`DEFAULT_TTL_SECONDS`.
    """

    global_defaults: Optional[dict[str, ResponseSpec]] = None
    global_cache: CachePolicy = Field(default_factory=CachePolicy)
    routes: dict[str, RouteExpectation] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _apply_defaults(self) -> MockConfig:
        if self.global_defaults is None:
            self.global_defaults = copy.deepcopy(DEFAULT_RESPONSES)
        if self.global_cache.ttl_seconds == 0:
            self.global_cache.ttl_seconds = DEFAULT_TTL_SECONDS
        return self


def _json_error(status_code: int, message: str) -> ResponseSpec:
    return ResponseSpec(
        status_code=status_code,
        headers={"Content-Type": "application/json"},
        body={"status": "error", "message": message},
    )


DEFAULT_RESPONSES: dict[str, ResponseSpec] = {
    SUCCESS_CLASS: ResponseSpec(
        status_code=200,
        headers={"Content-Type": "application/json"},
        body={"status": "success"},
    ),
    "400": _json_error(400, "Bad request"),
    "401": _json_error(401, "Unauthorized"),
    "403": _json_error(403, "Forbidden"),
    "404": _json_error(404, "Not found"),
    "5xx": _json_error(500, "Internal server error"),
}
"""Fallback response table used when a configuration declares no ``globalDefaults``."""


# --- Resolver output ---


class MockResponse(BaseModel):
    """A simulated HTTP response.

    Instances are frozen at the top level only; ``headers`` and
    ``parsed_body`` are mutable containers. The resolver therefore stores one
    copy in the cache and hands each caller its own deep copy.

    Attributes:
        status_code: HTTP status code.
        headers: Case-insensitive response headers.
        raw_body: The canonical JSON encoding of ``parsed_body``.
        parsed_body: The structured body as configured.
        content_type: Value of the ``Content-Type`` header, or ``""``.
        cached_at: When the response was stored in the cache, or ``None``
            if it was never cached.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    status_code: int
    headers: httpx.Headers = Field(default_factory=httpx.Headers)
    raw_body: bytes = b""
    parsed_body: Any = None
    content_type: str = ""
    cached_at: Optional[datetime] = None

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def text(self) -> str:
        """Decode :attr:`raw_body` as UTF-8."""
        return self.raw_body.decode("utf-8")

    def decode_json(self) -> Any:
        """Parse :attr:`raw_body` as JSON, returning ``None`` for an empty body."""
        if not self.raw_body:
            return None
        return json.loads(self.raw_body)

    def to_httpx(self, request: Optional[httpx.Request] = None) -> httpx.Response:
        """Build an :class:`httpx.Response` carrying the same status, headers and body."""
        return httpx.Response(
            status_code=self.status_code,
            headers=self.headers,
            content=self.raw_body,
            request=request,
        )
