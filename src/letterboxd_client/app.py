"""Typer application and CLI entry point for letterboxd_client.

This module wires together the top-level Typer application and registers
the built-in sub-commands (``auth``, ``request``, ``config``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs a SIGINT handler, invokes the Typer app and
maps any error that escapes a command onto its exit code.

See Also:
    :mod:`letterboxd_client.config`: Profile resolution.
    :mod:`letterboxd_client.output`: Output formatting initialised in
    :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
from typing import Any, Optional

import httpx
import typer

from letterboxd_client import __version__
from letterboxd_client.commands.auth import auth_app
from letterboxd_client.commands.config import config_app
from letterboxd_client.commands.request import request_command
from letterboxd_client.exceptions import LetterboxdError
from letterboxd_client.exit_codes import EXIT_CONNECTION_ERROR, EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="letterboxd-auth",
    help="Sign requests and drive the OAuth flow for the Letterboxd API.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.add_typer(auth_app, name="auth", help="PKCE and token endpoint operations.")
app.add_typer(config_app, name="config", help="Profile management.")
app.command("request")(request_command)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"letterboxd-auth {__version__}")
        raise typer.Exit()


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
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Profile name to use."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Override the API base URL."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~letterboxd_client.output.OutputManager`
    from the CLI flags and stores ``profile`` and ``base_url`` in
    ``ctx.obj`` for the sub-commands.
    """
    from letterboxd_client.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["profile"] = profile
    ctx.obj["base_url"] = base_url


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``letterboxd-auth`` console script.

    :class:`~letterboxd_client.exceptions.LetterboxdError` exits with the
    error's ``exit_code`` and :class:`httpx.HTTPError` with
    :data:`~letterboxd_client.exit_codes.EXIT_CONNECTION_ERROR`. Anything
    else is reported and exits with a generic failure.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app(standalone_mode=True)
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from letterboxd_client.output import error

        if isinstance(exc, LetterboxdError):
            error(str(exc))
            sys.exit(exc.exit_code)
        if isinstance(exc, httpx.HTTPError):
            error(f"Connection failed: {exc}")
            sys.exit(EXIT_CONNECTION_ERROR)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
