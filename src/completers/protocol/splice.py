"""Splicing a completion into a line around the cursor.

A completion process replaces the *query* -- the word the cursor is in --
with the chosen completion and moves the cursor to the end of the inserted
text. Everything before and after the query is kept verbatim.
"""

from __future__ import annotations

from completers.models import LineState

DEFAULT_BOUNDARIES = " "


def query_range(text: str, point: int, boundaries: str = DEFAULT_BOUNDARIES) -> tuple[int, int]:
    """Return the half-open range ``[start, end)`` of the word at *point*.

    Words are runs of characters between any of the *boundaries*
    characters. A point right after a word (on the following boundary)
    still belongs to that word. Empty text yields ``(0, 0)``.

    Example::

        >>> query_range("foo bar", 3)
        (0, 3)
        >>> query_range("foo bar", 4)
        (4, 7)
    """
    start = 0
    for end, char in enumerate(text):
        if char not in boundaries:
            continue
        if start <= point <= end:
            return start, end
        start = end + 1
    if start <= point <= len(text):
        return start, len(text)
    return 0, 0


def splice(state: LineState, start: int, end: int, replacement: str) -> LineState:
    """Replace ``state.text[start:end]`` with *replacement*.

    The cursor lands right after the inserted text.
    """
    if not 0 <= start <= end <= len(state.text):
        raise ValueError(f"Invalid splice range [{start}, {end}) for {state.text!r}")
    text = state.text[:start] + replacement + state.text[end:]
    return LineState(text=text, point=start + len(replacement))


def replace_query(
    state: LineState, replacement: str, boundaries: str = DEFAULT_BOUNDARIES
) -> LineState:
    """Replace the word at the cursor with *replacement*."""
    start, end = query_range(state.text, state.point, boundaries)
    return splice(state, start, end, replacement)
