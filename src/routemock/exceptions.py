"""Exception hierarchy for routemock.

All exceptions inherit from :class:`RoutemockError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`routemock.exit_codes`.
The CLI entry point :func:`routemock.app.main` catches ``RoutemockError``
and exits with the matching code. Library callers catch the specific
subclasses.

Subclass hierarchy::

    RoutemockError              (exit 1)
    +-- ConfigLoadError         (exit 3)
    +-- RouteNotFoundError      (exit 4)
    +-- EncodingError           (exit 5)
    +-- RequestCancelledError   (exit 6)
        +-- ResolveTimeoutError (exit 6)
"""

from routemock.exit_codes import (
    EXIT_CANCELLED,
    EXIT_CONFIG_ERROR,
    EXIT_ENCODING_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_ROUTE_NOT_FOUND,
)


class RoutemockError(Exception):
    """Base exception for all routemock errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigLoadError(RoutemockError):
    """Raised when the configuration cannot be read, parsed, or validated."""

    exit_code = EXIT_CONFIG_ERROR


class RouteNotFoundError(RoutemockError):
    """Raised when a route name is not declared in the configuration.

    Attributes:
        route_name: The name that failed to resolve.
    """

    exit_code = EXIT_ROUTE_NOT_FOUND

    def __init__(self, route_name: str):
        super().__init__(f"Route '{route_name}' not found in configuration")
        self.route_name = route_name


class EncodingError(RoutemockError):
    """Raised when a response body cannot be serialised to bytes."""

    exit_code = EXIT_ENCODING_ERROR


class RequestCancelledError(RoutemockError):
    """Raised when the caller cancels a resolve before its simulated delay ends."""

    exit_code = EXIT_CANCELLED


class ResolveTimeoutError(RequestCancelledError):
    """Raised when the caller's timeout fires before the simulated delay ends."""
