"""Reference completion process.

``completers-process`` is the back-end half of the protocol: it is started
once per trigger, reads the line and cursor from its arguments, and writes
exactly one result record before exiting::

    completers-process --point=<int> <line-text> [aux-arg ...]

By default it echoes the request unchanged. ``--replace WORD`` splices
``WORD`` over the word under the cursor, which is what a real completion
engine does once a candidate has been chosen. Choosing candidates is not
this program's job.

Both stdout and stderr may carry the result record (``--channel``), so all
logging goes to a file. Failure paths write no record and exit non-zero.
"""

from __future__ import annotations

import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Optional

import typer

from completers import __version__
from completers.exceptions import CompletersError
from completers.protocol.codec import encode_result, parse_point
from completers.protocol.splice import replace_query

logger = logging.getLogger(__name__)


class RecordStream(str, Enum):
    """Output stream that receives the result record."""

    STDOUT = "stdout"
    STDERR = "stderr"


process_app = typer.Typer(
    name="completers-process",
    help="Reference completion process for the completers protocol.",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"completers-process {__version__}")
        raise typer.Exit()


@process_app.command(
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True}
)
def complete(
    point: str = typer.Option(
        ..., "--point", "-p", help="Cursor position within LINE (0-based characters)."
    ),
    line: str = typer.Argument(..., help="The current input line."),
    aux: Optional[list[str]] = typer.Argument(
        None, help="Auxiliary arguments, accepted and logged."
    ),
    replace: Optional[str] = typer.Option(
        None, "--replace", help="Replace the word under the cursor with this text."
    ),
    channel: RecordStream = typer.Option(
        RecordStream.STDOUT, "--channel", help="Stream the result record is written to."
    ),
    debug: bool = typer.Option(False, "--debug", help="Log debug information."),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", help="Log file (default: <data dir>/logs/completers-process.log)."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Compute a new line and cursor position and print them as one record."""
    from completers.config import default_process_log_file, load_global_config
    from completers.output import setup_logging

    try:
        config = load_global_config()
        target = log_file or (
            Path(config.process.log_file)
            if config.process.log_file
            else default_process_log_file()
        )
        setup_logging(logging.DEBUG if debug else logging.WARNING, log_file=target)

        state = parse_point(point, line)
        logger.debug("Request: point=%d line=%r aux=%r", state.point, state.text, aux or [])

        if replace is not None:
            state = replace_query(state, replace, config.process.word_boundaries)

        record = encode_result(state)
        logger.debug("Result record: %r", record)
    except CompletersError as exc:
        logger.error("%s", exc)
        raise typer.Exit(code=exc.exit_code)

    stream = sys.stderr if channel == RecordStream.STDERR else sys.stdout
    stream.write(record + "\n")
    stream.flush()


def main() -> None:
    """Console-script entry point for ``completers-process``."""
    try:
        process_app()
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
