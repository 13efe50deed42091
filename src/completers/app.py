"""Typer application factory and CLI entry point for completers.

This module wires together the top-level Typer application and registers
the built-in sub-commands (``complete`` and ``config``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`completers.config`: Configuration resolution.
    :mod:`completers.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer

from completers import __version__
from completers.commands.complete import CONTEXT_SETTINGS, complete_command
from completers.commands.config import config_app
from completers.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="completers",
    help="Run external completion processes for interactive shells.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("complete", context_settings=CONTEXT_SETTINGS)(complete_command)
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"completers {__version__}")
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
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~completers.output.OutputManager` and,
    with ``--verbose``, routes library logging to stderr. The stored
    ``output`` settings act as defaults that the flags can only switch on.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
    """
    from completers.config import load_global_config
    from completers.exceptions import ConfigError
    from completers.models import OutputConfig
    from completers.output import OutputFormat, OutputManager, set_output, setup_logging

    try:
        stored = load_global_config().output
    except ConfigError:
        # Reported by whichever command reads the config; `config reset` must still run.
        stored = OutputConfig()

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    verbose = verbose or stored.verbose
    output = OutputManager(
        format=fmt,
        no_color=no_color or stored.no_color,
        quiet=quiet,
        verbose=verbose,
    )
    set_output(output)
    if verbose:
        setup_logging(logging.DEBUG, no_color=output.no_color)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from completers.config import get_logs_dir

    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = get_logs_dir() / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``completers`` console script.

    :class:`~completers.exceptions.CompletersError` instances cause a clean
    exit with the error's ``exit_code``. All other exceptions produce a
    crash log and a generic failure exit.

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
        from completers.exceptions import CompletersError
        from completers.output import error

        if isinstance(exc, CompletersError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
