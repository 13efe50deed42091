"""Abstract base class for result channels.

A result channel decides how the completion process's output streams are
wired and where the result record is read from once the process has
exited. The :class:`~completers.invoker.Invoker` holds no channel-specific
logic: it asks the channel for the ``subprocess.Popen`` stream arguments,
runs the child, and hands whatever the child wrote on stdout back to the
channel.

Channels are single-use. Create one per invocation (see
:func:`~completers.channels.get_channel`) and use it as a context manager
so that any side resources are released even when the child fails::

    with get_channel(ChannelKind.FILE) as channel:
        proc = subprocess.Popen(argv, **channel.streams())
        stdout, _ = proc.communicate()
        record = channel.read(stdout)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from completers.models import ChannelKind


class ResultChannel(ABC):
    """Base class for the two result-delivery variants."""

    kind: ChannelKind

    def __enter__(self) -> "ResultChannel":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @abstractmethod
    def streams(self) -> dict[str, Any]:
        """Return the ``stdout`` / ``stderr`` keyword arguments for ``Popen``."""
        ...

    @abstractmethod
    def read(self, stdout: Optional[str]) -> str:
        """Return the raw result record after the child has exited.

        Args:
            stdout: Whatever the child wrote on stdout, or ``None`` when
                stdout was not captured.
        """
        ...

    def close(self) -> None:
        """Release resources held for this invocation. Default is a no-op."""
