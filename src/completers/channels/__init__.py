"""Result channels -- how a completion process hands back its record.

Classes:
    :class:`ResultChannel` -- abstract base.
    :class:`PipeChannel` -- record on the child's stdout.
    :class:`FileChannel` -- record on the child's stderr, captured in a
    per-invocation temporary file.

:func:`get_channel` selects the implementation from a
:class:`~completers.models.ChannelKind`.
"""

from __future__ import annotations

from typing import Optional

from completers.channels.base import ResultChannel
from completers.channels.file import FileChannel
from completers.channels.pipe import PipeChannel
from completers.models import ChannelKind


def get_channel(kind: ChannelKind, result_dir: Optional[str] = None) -> ResultChannel:
    """Create a fresh single-use channel of the given kind."""
    if kind == ChannelKind.FILE:
        return FileChannel(result_dir)
    return PipeChannel()


__all__ = ["ResultChannel", "PipeChannel", "FileChannel", "get_channel"]
