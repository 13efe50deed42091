"""Stdout-pipe result channel.

The completion process prints its record on stdout. Its stderr is
discarded so diagnostics can never be mistaken for the record.
"""

from __future__ import annotations

import subprocess
from typing import Any, Optional

from completers.channels.base import ResultChannel
from completers.models import ChannelKind
from completers.protocol.codec import first_line


class PipeChannel(ResultChannel):
    """Read the result record from the child's stdout."""

    kind = ChannelKind.PIPE

    def streams(self) -> dict[str, Any]:
        return {"stdout": subprocess.PIPE, "stderr": subprocess.DEVNULL}

    def read(self, stdout: Optional[str]) -> str:
        return first_line(stdout or "")
