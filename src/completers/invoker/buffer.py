"""The live line buffer owned by an interactive loop.

:class:`LineBuffer` is the single mutable copy of the line being edited.
Completions never mutate it directly: :meth:`LineBuffer.trigger` takes a
snapshot, asks the invoker for a new state, and applies it only if the
buffer has not been edited in the meantime. Text and point are always
replaced together under one lock.
"""

from __future__ import annotations

import threading
from typing import Iterable

from completers.invoker.invoker import Invoker
from completers.models import CompletionOutcome, LineState
from completers.output import debug, warning


class LineBuffer:
    """Mutable line state with generation-checked updates.

    Every change bumps :attr:`generation`. A result computed from an older
    generation is discarded by :meth:`apply`.
    """

    def __init__(self, text: str = "", point: int = 0) -> None:
        self._state = LineState(text=text, point=point)
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def state(self) -> LineState:
        with self._lock:
            return self._state

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def snapshot(self) -> tuple[LineState, int]:
        """Return the current state together with its generation."""
        with self._lock:
            return self._state, self._generation

    def edit(self, state: LineState) -> None:
        """Replace the buffer contents as a user edit would."""
        with self._lock:
            self._state = state
            self._generation += 1

    def apply(self, state: LineState, generation: int) -> bool:
        """Install *state* if the buffer is still at *generation*.

        Returns:
            ``True`` if the buffer was updated, ``False`` if it had changed
            since the snapshot and *state* was dropped.
        """
        with self._lock:
            if generation != self._generation:
                return False
            self._state = state
            self._generation += 1
            return True

    def trigger(self, invoker: Invoker, aux_args: Iterable[str] = ()) -> CompletionOutcome:
        """Run one completion against the current contents and apply it.

        Completion failures are reported as warnings and leave the buffer
        untouched; they are never raised.
        """
        state, generation = self.snapshot()
        outcome = invoker.request_completion(state, aux_args)
        if not outcome.ok:
            warning(f"Completion unavailable: {outcome.error}")
            return outcome
        if not self.apply(outcome.state, generation):
            debug("Discarded completion result for an outdated line")
        return outcome
