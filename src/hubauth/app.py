"""Typer application and CLI entry point for hubauth.

The CLI is a developer tool around the library: it shows which strategy a
configuration selects, prints the consent URI, decorates URLs with the API
key, runs a single token exchange, and manages the variable file.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. :class:`~hubauth.exceptions.HubauthError` instances that
escape a command are reported on stderr and mapped to their exit code.

See Also:
    :mod:`hubauth.commands.auth`: Strategy, consent and exchange commands.
    :mod:`hubauth.commands.vars`: Variable file management.
"""

from __future__ import annotations

import logging
import signal
import sys
from typing import Any, Optional

import typer

from hubauth import __version__
from hubauth.commands.auth import (
    authorize_url_command,
    decorate_command,
    exchange_command,
    mode_command,
)
from hubauth.commands.vars import vars_app
from hubauth.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="hubauth",
    help="Authenticate HubSpot API requests with an API key or OAuth2.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("mode")(mode_command)
app.command("authorize-url")(authorize_url_command)
app.command("decorate")(decorate_command)
app.command("exchange")(exchange_command)
app.add_typer(vars_app, name="vars", help="Manage the process-wide variable file.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"hubauth {__version__}")
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
    overrides: Optional[list[str]] = typer.Option(
        None,
        "--set",
        "-s",
        help="Per-client property override, e.g. --set Auth.scope=contacts.",
    ),
    callback_uri: Optional[str] = typer.Option(
        None,
        "--callback-uri",
        envvar="HUBAUTH_CALLBACK_URI",
        help="Registered OAuth2 redirect URI.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~hubauth.output.CliOutput` and stores
    the per-client overrides and callback URI in ``ctx.obj``.
    """
    from hubauth.output import CliOutput, OutputFormat, set_output

    fmt = OutputFormat.TEXT
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(CliOutput(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    if verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    ctx.ensure_object(dict)
    ctx.obj["overrides"] = list(overrides or [])
    ctx.obj["callback_uri"] = callback_uri


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``hubauth`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from hubauth.exceptions import ConsentRequiredError, HubauthError
        from hubauth.output import error, suggest

        if isinstance(exc, HubauthError):
            error(str(exc))
            if isinstance(exc, ConsentRequiredError):
                suggest(f"Grant access at: {exc.redirect_uri}")
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
