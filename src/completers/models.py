"""Canonical Pydantic models shared across all completers modules.

The models fall into two groups:

**Protocol models** -- the values exchanged in one trigger-response cycle:
    :class:`LineState`, :class:`CompletionRequest`, :class:`CompletionResult`
    and :class:`CompletionOutcome`. None of them outlives a single cycle.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`ChannelKind`, :class:`InvokerConfig`, :class:`ProcessConfig`,
    :class:`OutputConfig` and :class:`GlobalConfig`.

Protocol models are frozen so that a request cannot change while the
completion process is running.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from completers.exceptions import CompletionError


# --- Protocol models ---


class LineState(BaseModel):
    """An editable line and the position of the cursor within it.

    ``point`` counts characters (Python ``str`` indices), the same unit
    as ``len(text)``, and always satisfies ``0 <= point <= len(text)``.

    Example::

        LineState(text="gi st", point=2)   # cursor right after "gi"
    """

    model_config = ConfigDict(frozen=True)

    text: str = ""
    point: int = 0

    @model_validator(mode="after")
    def _check_point(self) -> "LineState":
        if self.point < 0 or self.point > len(self.text):
            raise ValueError(
                f"point {self.point} outside line of length {len(self.text)}"
            )
        return self


class CompletionRequest(BaseModel):
    """A line state plus opaque arguments forwarded to the completion process."""

    model_config = ConfigDict(frozen=True)

    state: LineState
    aux_args: tuple[str, ...] = ()


class CompletionResult(BaseModel):
    """The replacement line state decoded from a completion process."""

    model_config = ConfigDict(frozen=True)

    state: LineState


@dataclass(frozen=True)
class CompletionOutcome:
    """Either a new line state or the error that suppressed it.

    On failure ``state`` is the unchanged state the request was built from,
    so callers may apply ``outcome.state`` unconditionally.
    """

    state: LineState
    error: Optional[CompletionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


# --- Configuration models ---


class ChannelKind(str, enum.Enum):
    """Where the completion process delivers its result record.

    ``PIPE`` reads the record from the child's stdout. ``FILE`` redirects
    the child's stderr into a per-invocation temporary file and reads the
    record from it after the child exits.
    """

    PIPE = "pipe"
    FILE = "file"


class InvokerConfig(BaseModel):
    """How the front-end locates and runs the completion process."""

    executable: str = Field(
        default="completers-process",
        description="Completion process: a name looked up on PATH or a path",
    )
    channel: ChannelKind = Field(
        default=ChannelKind.PIPE, description="Result channel: pipe or file"
    )
    timeout: float = Field(
        default=1.0, gt=0, description="Seconds before the process is killed"
    )
    args: list[str] = Field(
        default_factory=list,
        description="Auxiliary arguments appended to every request",
    )
    result_dir: Optional[str] = Field(
        default=None,
        description="Directory for file-channel temp files (system temp dir if unset)",
    )


class ProcessConfig(BaseModel):
    """Settings read by the reference completion process."""

    log_file: Optional[str] = Field(
        default=None, description="Log file path (data dir if unset)"
    )
    word_boundaries: str = Field(
        default=" ", min_length=1, description="Characters separating words"
    )


class OutputConfig(BaseModel):
    """Default diagnostic output preferences stored in :class:`GlobalConfig`."""

    no_color: bool = Field(default=False, description="Disable colour output")
    verbose: bool = Field(default=False, description="Show debug diagnostics")


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/completers/config.json``.

    Loaded and saved by :func:`~completers.config.load_global_config` and
    :func:`~completers.config.save_global_config`. Fields here have the
    lowest precedence; see :func:`~completers.config.resolve_config`.
    """

    invoker: InvokerConfig = Field(default_factory=InvokerConfig)
    process: ProcessConfig = Field(default_factory=ProcessConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
