"""routemock -- deterministic mock HTTP responses from a route configuration.

Routes are declared in a JSON or YAML document with an expected response,
fallback responses per status class, an optional simulated delay, and a
cache policy. Resolving a route never touches the network: the response is
synthesised from the configuration and successful ``GET`` responses are
kept in an in-memory TTL cache.

Typical use::

    from routemock import MockClient

    with MockClient.from_source("routemock.json") as client:
        response = client.resolve("list-users")

Modules:
    app: Typer command-line interface.
    cache: In-memory TTL cache and background sweepers.
    client: Sync and async clients.
    config: Configuration loading and discovery.
    exceptions: Exception hierarchy with exit-code mapping.
    models: Pydantic models shared across the package.
    resolver: Cache-key derivation and response selection.
"""

__version__ = "0.1.0"

from routemock.client import AsyncMockClient, MockClient  # noqa: E402
from routemock.exceptions import (  # noqa: E402
    ConfigLoadError,
    EncodingError,
    RequestCancelledError,
    ResolveTimeoutError,
    RouteNotFoundError,
    RoutemockError,
)

__all__ = [
    "AsyncMockClient",
    "ConfigLoadError",
    "EncodingError",
    "MockClient",
    "RequestCancelledError",
    "ResolveTimeoutError",
    "RouteNotFoundError",
    "RoutemockError",
    "__version__",
]
