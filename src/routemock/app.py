"""Typer application and CLI entry point for routemock.

Commands:

* ``routemock resolve ROUTE`` -- resolve one route and print its body.
* ``routemock routes`` -- list the routes of a configuration.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs a SIGINT handler and invokes the Typer app.
Commands turn :class:`~routemock.exceptions.RoutemockError` into an error
message on stderr plus the error's exit code.

See Also:
    :mod:`routemock.config`: Configuration discovery used by every command.
    :mod:`routemock.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import typer
from rich.logging import RichHandler

from routemock import __version__
from routemock.exceptions import RoutemockError
from routemock.exit_codes import EXIT_INTERRUPTED

app = typer.Typer(
    name="routemock",
    help="Resolve mock HTTP responses from a route configuration.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"routemock {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool, console: Any) -> None:
    """Send ``routemock.*`` log records to stderr through Rich when verbose."""
    logger = logging.getLogger("routemock")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    if verbose:
        logger.addHandler(RichHandler(console=console, show_path=False))
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.WARNING)


@contextmanager
def _exit_on_error() -> Iterator[None]:
    """Report a :class:`RoutemockError` on stderr and exit with its code."""
    try:
        yield
    except RoutemockError as exc:
        from routemock.output import error

        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Initialise output and logging from the global flags."""
    from routemock.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    set_output(output)
    _configure_logging(verbose, output.stderr_console)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@app.command("resolve")
def resolve_command(
    route: str = typer.Argument(..., help="Name of the route to resolve."),
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="Configuration file, URL, or '-' for stdin."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", min=0, help="Give up on the simulated delay after N seconds."
    ),
    include_headers: bool = typer.Option(
        False, "--include-headers", "-i", help="Print response headers to stderr."
    ),
) -> None:
    """Resolve ROUTE and print the response body."""
    from routemock.client import MockClient
    from routemock.client.response import render_response
    from routemock.config import load_config, resolve_config_source
    from routemock.output import debug, warning

    with _exit_on_error():
        source = resolve_config_source(config)
        debug(f"Loading configuration from {source}")
        with MockClient(load_config(source), start_sweeper=False) as client:
            declared = client.config.routes.get(route)
            if timeout is not None and declared is not None and not declared.delay_seconds:
                warning(f"Route '{route}' has no simulated delay; --timeout has no effect")
            response = client.resolve_with_cancellation(route, timeout=timeout)
    render_response(response, include_headers=include_headers)


@app.command("routes")
def routes_command(
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="Configuration file, URL, or '-' for stdin."
    ),
) -> None:
    """List the routes declared in the configuration."""
    from routemock.config import load_config, resolve_config_source
    from routemock.output import get_output, info
    from routemock.resolver import CACHEABLE_METHOD

    with _exit_on_error():
        cfg = load_config(resolve_config_source(config))
    if not cfg.routes:
        info("No routes configured.")
        return

    rows = []
    for name, route in sorted(cfg.routes.items()):
        policy = route.cache if route.cache.enabled else cfg.global_cache
        cacheable = policy.enabled and route.method == CACHEABLE_METHOD
        cache = f"{policy.effective_ttl}s" if cacheable else "off"
        if route.expected_response is not None:
            status = str(route.expected_response.status_code)
        else:
            status = "default"
        rows.append([name, route.method, route.path, status, cache, f"{route.delay_seconds:g}s"])
    get_output().print_table(
        ["Route", "Method", "Path", "Status", "Cache", "Delay"], rows, title="Routes"
    )


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``routemock`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)


if __name__ == "__main__":  # pragma: no cover
    main()
