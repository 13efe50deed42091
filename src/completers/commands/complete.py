"""The ``complete`` command -- run one completion from a shell key binding.

A shell binding passes its line buffer and cursor::

    completers complete --point="$READLINE_POINT" "$READLINE_LINE" [AUX...]

On success the result record (``<point> <line>``) is the only thing printed
on stdout. On any completion failure nothing is printed on stdout, a
warning goes to stderr, and the exit status tells the wrapper to keep its
buffer as it was.
"""

from __future__ import annotations

from typing import Optional

import typer

from completers.models import ChannelKind
from completers.output import debug, error, print_data, warning


CONTEXT_SETTINGS = {"allow_extra_args": True, "ignore_unknown_options": True}
"""Unknown options are forwarded to the completion process as auxiliary arguments."""


def complete_command(
    point: str = typer.Option(
        ..., "--point", "-p", help="Cursor position within LINE (0-based characters)."
    ),
    line: str = typer.Argument(..., help="The current input line."),
    aux: Optional[list[str]] = typer.Argument(
        None, help="Auxiliary arguments forwarded verbatim to the completion process."
    ),
    executable: Optional[str] = typer.Option(
        None, "--executable", "-e", help="Completion process to run."
    ),
    channel: Optional[ChannelKind] = typer.Option(
        None, "--channel", help="Result channel: pipe (stdout) or file (stderr)."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", min=0.001, help="Seconds before the process is killed."
    ),
) -> None:
    """Run the completion process and print its result record.

    Example::

        completers complete --point=2 "gi st"
        completers complete --point=0 "" --channel file --timeout 0.5
    """
    from completers.config import resolve_config
    from completers.exceptions import CompletersError
    from completers.invoker import Invoker
    from completers.protocol.codec import encode_result, parse_point

    try:
        config = resolve_config(
            cli_executable=executable,
            cli_channel=channel.value if channel is not None else None,
            cli_timeout=timeout,
        )
        state = parse_point(point, line)
    except CompletersError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)

    invoker = Invoker.from_config(config.invoker)
    debug(f"Invoking {invoker.executable} via {invoker.channel.value} channel")
    outcome = invoker.request_completion(state, aux or [])
    if outcome.error is not None:
        warning(f"Completion unavailable: {outcome.error}")
        raise typer.Exit(code=outcome.error.exit_code)

    print_data(encode_result(outcome.state))
