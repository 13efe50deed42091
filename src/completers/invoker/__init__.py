"""Front-end side of the completion protocol.

Classes:
    :class:`Invoker` -- runs one completion process per request.
    :class:`LineBuffer` -- the interactive loop's live line, updated
    atomically from completion results.

Example::

    from completers.invoker import Invoker, LineBuffer

    buffer = LineBuffer("gi st", 2)
    buffer.trigger(Invoker("completers-process"))
"""

from completers.invoker.buffer import LineBuffer
from completers.invoker.invoker import Invoker

__all__ = ["Invoker", "LineBuffer"]
