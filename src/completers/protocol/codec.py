"""Encoding of completion requests and decoding of result records.

A request travels to the completion process as an argument vector::

    completers-process --point=<int> <line-text> [aux-arg ...]

and comes back as a single *result record*::

    <int new-point><one whitespace char><new line text to end of record>

The line text is the last field of the record, so it may contain any
whitespace of its own. The offset is digits only, which keeps the record
parseable with a single split on the first separator.
"""

from __future__ import annotations

import re
import shlex

from pydantic import ValidationError

from completers.exceptions import InvalidUsageError, MalformedResult
from completers.models import CompletionRequest, LineState

POINT_OPTION = "--point"

_RECORD_RE = re.compile(r"([0-9]+)\s(.*)", re.DOTALL)


def encode_arguments(request: CompletionRequest) -> list[str]:
    """Build the argument vector (without the executable) for *request*.

    The line text is passed as one argument; no shell is involved, so no
    quoting is applied.
    """
    state = request.state
    return [f"{POINT_OPTION}={state.point}", state.text, *request.aux_args]


def render_command(argv: list[str]) -> str:
    """Render *argv* as a shell-quoted string for diagnostics."""
    return shlex.join(argv)


def encode_result(state: LineState) -> str:
    """Encode *state* as a result record (no trailing newline)."""
    return f"{state.point} {state.text}"


def first_line(data: str) -> str:
    """Return the first line of *data* without its line terminator."""
    line = data.split("\n", 1)[0]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def decode_result(record: str) -> LineState:
    """Decode a result record into a :class:`LineState`.

    Only the first line of *record* is considered.

    Args:
        record: Raw output read from the result channel.

    Returns:
        The new line state.

    Raises:
        MalformedResult: If the record is empty, has no separator after the
            offset, has a non-numeric offset, or places the point past the
            end of the text.

    Example::

        >>> decode_result("5 hello world")
        LineState(text='hello world', point=5)
    """
    line = first_line(record)
    if not line:
        raise MalformedResult("Empty result record")

    match = _RECORD_RE.fullmatch(line)
    if match is None:
        raise MalformedResult(f"Result record does not match '<offset> <text>': {line!r}")

    point = int(match.group(1))
    text = match.group(2)
    if point > len(text):
        raise MalformedResult(
            f"Result offset {point} is past the end of a {len(text)}-character line"
        )
    return LineState(text=text, point=point)


def parse_point(value: str, text: str) -> LineState:
    """Validate a ``--point`` value against *text* and build the line state.

    Used on the completion-process side of the protocol.

    Raises:
        InvalidUsageError: If *value* is not a non-negative integer or lies
            outside the line.
    """
    if not value.isdigit() or not value.isascii():
        raise InvalidUsageError(f"Invalid {POINT_OPTION} value: {value!r}")
    try:
        return LineState(text=text, point=int(value))
    except ValidationError as exc:
        raise InvalidUsageError(
            f"{POINT_OPTION}={value} is outside a {len(text)}-character line"
        ) from exc
