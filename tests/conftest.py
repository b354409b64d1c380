"""Shared test fixtures for routemock.

Provides a controllable clock for cache expiry tests, ready-made
configurations covering the common route shapes, and output isolation.
These fixtures are automatically discovered by pytest and available to all
test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from routemock.config import load_config
from routemock.models import (
    CachePolicy,
    MockConfig,
    ResponseSpec,
    RouteExpectation,
)
from routemock.output import OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


class FakeClock:
    """Manually advanced replacement for :func:`time.monotonic`."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches sys.stdout/sys.stderr at creation time; CliRunner
    swaps those streams per invocation, so a stale manager would write to a
    closed file.
    """
    yield
    reset_output()


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a plain, quiet OutputManager for tests that ignore output."""
    output = OutputManager(no_color=True, quiet=True)
    set_output(output)
    return output


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ---------------------------------------------------------------------------
# Configuration fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def routes_json() -> Path:
    return FIXTURES_DIR / "routes.json"


@pytest.fixture
def routes_yaml() -> Path:
    return FIXTURES_DIR / "routes.yaml"


@pytest.fixture
def fixture_config(routes_json: Path) -> MockConfig:
    """The JSON fixture: cached ``test-route``, delayed ``timeout-route``, POST ``create-user``."""
    return load_config(str(routes_json))


@pytest.fixture
def sample_config() -> MockConfig:
    """A configuration built in Python covering every fallback path."""
    return MockConfig(
        global_cache=CachePolicy(enabled=True, ttl_seconds=300),
        routes={
            "test-route": RouteExpectation(
                method="GET",
                path="/test",
                expected_response=ResponseSpec(
                    status_code=200,
                    headers={"Content-Type": "application/json"},
                    body={"message": "test response"},
                ),
                cache=CachePolicy(enabled=True, ttl_seconds=300),
            ),
            "route-default": RouteExpectation(
                path="/route-default",
                default_responses={
                    "2xx": ResponseSpec(status_code=202, body={"from": "route"}),
                },
            ),
            "global-default": RouteExpectation(path="/global-default"),
            "not-found": RouteExpectation(
                path="/missing",
                expected_response=ResponseSpec(
                    status_code=404, body={"error": "missing"}
                ),
            ),
            "search": RouteExpectation(
                path="/search",
                query_params={"q": "cats", "page": "2"},
                expected_response=ResponseSpec(body={"results": []}),
            ),
            "create": RouteExpectation(
                method="POST",
                path="/items",
                body={"name": "widget"},
                expected_response=ResponseSpec(status_code=201, body={"id": 1}),
            ),
            "slow": RouteExpectation(
                path="/slow",
                delay_seconds=1,
                expected_response=ResponseSpec(body={"slow": True}),
            ),
        },
    )
