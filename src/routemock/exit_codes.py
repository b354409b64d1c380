"""Numeric process exit codes used by the ``routemock`` command line.

Each constant maps to one error category and is referenced by the
corresponding :class:`~routemock.exceptions.RoutemockError` subclass, so
shell scripts driving the mock can tell a missing route from a broken
configuration without parsing stderr.

Example::

    $ routemock resolve no-such-route
    $ echo $?
    4   # EXIT_ROUTE_NOT_FOUND
"""

EXIT_SUCCESS = 0
"""The route resolved successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_CONFIG_ERROR = 3
"""The configuration could not be read, parsed, or validated."""

EXIT_ROUTE_NOT_FOUND = 4
"""The requested route name is not declared in the configuration."""

EXIT_ENCODING_ERROR = 5
"""The configured response body could not be serialised."""

EXIT_CANCELLED = 6
"""The simulated delay was cancelled or timed out."""

EXIT_INTERRUPTED = 130
"""The process received SIGINT (Ctrl-C)."""
