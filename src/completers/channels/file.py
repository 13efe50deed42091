"""Intermediate-file result channel.

The completion process writes its record on stderr, which is redirected
into a temporary file; stdout is discarded. This mirrors shells that run
``completers ... 2> /tmp/result`` and read the file afterwards, and it keeps
the record away from anything the process prints on stdout.

Every invocation gets its own uniquely named file, so concurrent
invocations can never read each other's results. The file is removed when
the channel is closed.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from typing import IO, Any, Optional

from completers.channels.base import ResultChannel
from completers.models import ChannelKind
from completers.protocol.codec import first_line

logger = logging.getLogger(__name__)


class FileChannel(ResultChannel):
    """Read the result record from a per-invocation temporary file.

    Args:
        result_dir: Directory for the temporary file. Defaults to the
            system temporary directory.
    """

    kind = ChannelKind.FILE

    def __init__(self, result_dir: Optional[str] = None) -> None:
        self._result_dir = result_dir
        self._file: Optional[IO[bytes]] = None

    @property
    def path(self) -> Optional[str]:
        """Path of the temporary file, or ``None`` before :meth:`streams`."""
        return self._file.name if self._file is not None else None

    def streams(self) -> dict[str, Any]:
        if self._file is None:
            if self._result_dir:
                os.makedirs(self._result_dir, exist_ok=True)
            self._file = tempfile.NamedTemporaryFile(
                mode="w+b",
                dir=self._result_dir,
                prefix="completers-result-",
                suffix=".txt",
                delete=False,
            )
            logger.debug("Result file: %s", self._file.name)
        return {"stdout": subprocess.DEVNULL, "stderr": self._file}

    def read(self, stdout: Optional[str]) -> str:
        if self._file is None:
            return ""
        self._file.seek(0)
        data = self._file.read().decode("utf-8", errors="replace")
        return first_line(data)

    def close(self) -> None:
        if self._file is None:
            return
        path = self._file.name
        self._file.close()
        self._file = None
        try:
            os.unlink(path)
        except FileNotFoundError:
            pass
