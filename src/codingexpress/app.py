"""Typer application and CLI entry point for codingexpress.

This module wires the top-level Typer application and registers the built-in
commands (``init``, ``make:controller``, ``make:model``, ``make:route``,
``make:resource``, ``update:resource``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers, registers commands and
invokes the Typer app. Unhandled exceptions are written to a crash log under
the data directory.

See Also:
    :mod:`codingexpress.config`: Project configuration and data directory.
    :mod:`codingexpress.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer

from codingexpress import __version__
from codingexpress.exit_codes import EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="codingexpress",
    help="Scaffold Express.js applications, optionally generated from OpenAPI 3.x documents.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

_registered = False


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"codingexpress {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
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
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Root callback executed before every command.

    Initialises the global :class:`~codingexpress.output.OutputManager`
    from CLI flags and routes library logging through it.

    Args:
        version: If ``True``, print the version string and exit.
        json_output: Force JSON output for the summary table.
        plain_output: Force plain-text output for the summary table.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
    """
    from codingexpress.output import OutputFormat, OutputManager, configure_logging, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    set_output(output)
    configure_logging(output)


def register_commands() -> None:
    """Attach the built-in commands to :data:`app`. Safe to call twice."""
    global _registered
    if _registered:
        return
    from codingexpress.commands.init import init_command
    from codingexpress.commands.make import (
        make_controller_command,
        make_model_command,
        make_resource_command,
        make_route_command,
    )
    from codingexpress.commands.update import update_resource_command

    app.command("init")(init_command)
    app.command("make:controller")(make_controller_command)
    app.command("make:model")(make_model_command)
    app.command("make:route")(make_route_command)
    app.command("make:resource")(make_resource_command)
    app.command("update:resource")(update_resource_command)
    _registered = True


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from codingexpress.config import get_data_dir

    logs_dir = get_data_dir()
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``codingexpress`` console script.

    Unhandled :class:`~codingexpress.exceptions.CodingExpressError`
    instances cause a clean exit with the error's ``exit_code``. All other
    exceptions produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        register_commands()
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from codingexpress.exceptions import CodingExpressError
        from codingexpress.output import error

        if isinstance(exc, CodingExpressError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
