"""Response rendering bridge -- maps :class:`~routemock.models.MockResponse` to the output system.

After a route resolves, :func:`render_response` writes the status line (and
optionally the headers and cache timestamp) to stderr and the body to
stdout via :meth:`~routemock.output.OutputManager.format_body`.

See Also:
    :mod:`routemock.output` -- the output manager that renders data.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from routemock.models import MockResponse
from routemock.output import get_output


def render_response(response: MockResponse, include_headers: bool = False) -> None:
    """Print *response* using the global output system.

    Args:
        response: The resolved mock response.
        include_headers: Also print each header on stderr.
    """
    output = get_output()
    output.info(status_line(response))
    if include_headers:
        for name, value in response.headers.items():
            output.info(f"{name}: {value}")
    if response.cached_at is not None:
        output.debug(f"Cached at {response.cached_at.isoformat()}")

    data = extract_response_data(response)
    if data is not None:
        output.format_body(data, response.content_type or "application/json")


def status_line(response: MockResponse) -> str:
    """Return e.g. ``HTTP 200 OK``; unknown codes get no reason phrase."""
    try:
        reason = HTTPStatus(response.status_code).phrase
    except ValueError:
        return f"HTTP {response.status_code}"
    return f"HTTP {response.status_code} {reason}"


def extract_response_data(response: MockResponse) -> Any:
    """Return the body to display: the structured body, else the raw text, else ``None``."""
    if response.parsed_body is not None:
        return response.parsed_body
    if not response.raw_body:
        return None
    return response.text()
