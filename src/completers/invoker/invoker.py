"""Synchronous invoker for external completion processes.

The :class:`Invoker` runs exactly one completion process per request,
blocks until it exits (or its timeout expires), and decodes the result
record from the configured :class:`~completers.channels.ResultChannel`.

Two entry points are provided:

* :meth:`Invoker.run` raises a
  :class:`~completers.exceptions.CompletionError` subclass on any failure.
* :meth:`Invoker.request_completion` never raises for completion failures;
  it returns a :class:`~completers.models.CompletionOutcome` carrying either
  the new line state or the error, with the original state preserved.

Only one request may be in flight per invoker. A concurrent call is
rejected with :class:`~completers.exceptions.CompletionBusy` rather than
queued, so a stale result can never land after a newer one.
"""

from __future__ import annotations

import logging
import os
import shutil
import signal
import subprocess
import threading
from typing import Iterable, Optional, Sequence

from completers.channels import get_channel
from completers.exceptions import (
    CompletionBusy,
    CompletionError,
    NonZeroExit,
    ProcessLaunchFailure,
    ProcessTimeout,
)
from completers.models import (
    ChannelKind,
    CompletionOutcome,
    CompletionRequest,
    CompletionResult,
    InvokerConfig,
    LineState,
)
from completers.protocol.codec import decode_result, encode_arguments, render_command

logger = logging.getLogger(__name__)

# Seconds to wait for a killed process group to release its pipes.
REAP_TIMEOUT = 1.0


class Invoker:
    """Runs a completion process and decodes its result.

    Args:
        executable: Program name looked up on ``PATH``, or a path to it.
        channel: Which result channel the process writes its record to.
        timeout: Seconds to wait before killing the process.
        default_args: Auxiliary arguments placed before each request's own.
        result_dir: Directory for file-channel temporary files.

    Example::

        invoker = Invoker("completers-process", timeout=0.5)
        outcome = invoker.request_completion(LineState(text="gi st", point=2))
        if outcome.ok:
            print(outcome.state.text)
    """

    def __init__(
        self,
        executable: str,
        channel: ChannelKind = ChannelKind.PIPE,
        timeout: float = 1.0,
        default_args: Sequence[str] = (),
        result_dir: Optional[str] = None,
    ) -> None:
        self.executable = executable
        self.channel = ChannelKind(channel)
        self.timeout = timeout
        self.default_args = tuple(default_args)
        self.result_dir = result_dir
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: InvokerConfig) -> "Invoker":
        """Build an invoker from an :class:`~completers.models.InvokerConfig`."""
        return cls(
            executable=config.executable,
            channel=config.channel,
            timeout=config.timeout,
            default_args=config.args,
            result_dir=config.result_dir,
        )

    @property
    def busy(self) -> bool:
        """Whether a request is currently in flight."""
        return self._lock.locked()

    def resolve_executable(self) -> str:
        """Return the full path of the completion executable.

        Raises:
            ProcessLaunchFailure: If the executable cannot be found or is
                not executable.
        """
        path = shutil.which(self.executable)
        if path is None:
            raise ProcessLaunchFailure(
                f"Completion executable not found: {self.executable}"
            )
        return path

    def build_argv(self, request: CompletionRequest) -> list[str]:
        """Return the full command line for *request*."""
        merged = CompletionRequest(
            state=request.state,
            aux_args=(*self.default_args, *request.aux_args),
        )
        return [self.resolve_executable(), *encode_arguments(merged)]

    # ------------------------------------------------------------------
    # Running
    # ------------------------------------------------------------------

    def run(self, request: CompletionRequest) -> CompletionResult:
        """Run the completion process for *request* and decode its result.

        Raises:
            CompletionBusy: If another request is in flight on this invoker.
            ProcessLaunchFailure: If the process cannot be started.
            ProcessTimeout: If the process did not exit within
                :attr:`timeout`. The process is killed first.
            NonZeroExit: If the process exited with a non-zero status.
            MalformedResult: If the result record cannot be decoded.
        """
        if not self._lock.acquire(blocking=False):
            raise CompletionBusy("A completion request is already in flight")
        try:
            return self._run(request)
        finally:
            self._lock.release()

    def _run(self, request: CompletionRequest) -> CompletionResult:
        argv = self.build_argv(request)
        logger.debug("Running: %s", render_command(argv))

        with get_channel(self.channel, self.result_dir) as channel:
            try:
                proc = subprocess.Popen(
                    argv,
                    encoding="utf-8",
                    errors="replace",
                    start_new_session=True,
                    **channel.streams(),
                )
            except OSError as exc:
                raise ProcessLaunchFailure(f"Cannot start {argv[0]}: {exc}") from exc

            try:
                stdout, _ = proc.communicate(timeout=self.timeout)
            except subprocess.TimeoutExpired:
                _kill_process_group(proc)
                raise ProcessTimeout(
                    f"Completion process timed out after {self.timeout:g}s"
                ) from None

            if proc.returncode != 0:
                raise NonZeroExit(
                    f"Completion process exited with status {proc.returncode}",
                    proc.returncode,
                )
            record = channel.read(stdout)

        logger.debug("Result record: %r", record)
        return CompletionResult(state=decode_result(record))

    def request_completion(
        self, state: LineState, aux_args: Iterable[str] = ()
    ) -> CompletionOutcome:
        """Request a completion for *state* without raising.

        Returns:
            An outcome whose ``state`` is the new line state on success, or
            *state* itself with ``error`` set when the completion failed.
        """
        request = CompletionRequest(state=state, aux_args=tuple(aux_args))
        try:
            result = self.run(request)
        except CompletionError as exc:
            logger.debug("Completion failed (%s): %s", type(exc).__name__, exc)
            return CompletionOutcome(state=state, error=exc)
        return CompletionOutcome(state=result.state)


def _kill_process_group(proc: subprocess.Popen) -> None:
    """Kill *proc* and everything it spawned, then reap it.

    The process runs in its own session, so its pid is also its process
    group id. Descendants that escaped the group may keep the pipes open;
    in that case the pipes are closed rather than drained.
    """
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass
    try:
        proc.communicate(timeout=REAP_TIMEOUT)
    except subprocess.TimeoutExpired:
        logger.warning("Completion process %d left open pipes behind", proc.pid)
        for stream in (proc.stdout, proc.stderr):
            if stream is not None:
                stream.close()
        proc.wait()
