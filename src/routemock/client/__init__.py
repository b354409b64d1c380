"""Mock clients for routemock.

Provides synchronous and asynchronous clients that own a response cache and
its background sweeper, resolve named routes through
:class:`~routemock.resolver.ResponseResolver`, and simulate per-route
latency with caller-controlled cancellation.

Classes:
    :class:`MockClient` -- blocking client; delays wait on a
    :class:`threading.Event`.
    :class:`AsyncMockClient` -- non-blocking client; delays use
    :func:`asyncio.sleep`.

Example::

    from routemock.client import MockClient

    with MockClient.from_source("routemock.yaml") as client:
        resp = client.resolve("list-users")
"""

from routemock.client.async_client import AsyncMockClient
from routemock.client.sync_client import MockClient

__all__ = ["MockClient", "AsyncMockClient"]
