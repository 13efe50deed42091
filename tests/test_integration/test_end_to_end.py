"""End-to-end trigger-response cycles: live buffer, invoker, and a real process."""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Callable

import pytest

from completers.exceptions import NonZeroExit, ProcessTimeout
from completers.invoker import Invoker, LineBuffer
from completers.models import ChannelKind, LineState
from completers.output import OutputManager, set_output


REFERENCE_BODY = """
import runpy
sys.argv[0] = "completers-process"
runpy.run_module("completers.process", run_name="__main__")
"""
"""Runs the reference completion process from the source tree."""


@pytest.fixture(autouse=True)
def _quiet(isolated_config: Path) -> None:
    set_output(OutputManager(no_color=True, quiet=True))


@pytest.fixture
def reference_process(make_process: Callable[..., str]) -> str:
    return make_process(REFERENCE_BODY, name="completers-process")


class TestReferenceProcess:
    @pytest.mark.parametrize(
        ("text", "point"),
        [("", 0), ("gi st", 0), ("gi st", 2), ("gi st", 5), ("a  b\tc ", 3)],
    )
    def test_echo_identity(self, reference_process: str, text: str, point: int) -> None:
        buffer = LineBuffer(text, point)
        outcome = buffer.trigger(Invoker(reference_process, timeout=30))
        assert outcome.ok
        assert buffer.state == LineState(text=text, point=point)

    def test_replace_over_pipe(self, reference_process: str) -> None:
        buffer = LineBuffer("gi st", 2)
        buffer.trigger(Invoker(reference_process, timeout=30), ["--replace", "git"])
        assert buffer.state == LineState(text="git st", point=3)

    def test_replace_over_file_channel(self, reference_process: str, tmp_path: Path) -> None:
        invoker = Invoker(
            reference_process,
            channel=ChannelKind.FILE,
            timeout=30,
            default_args=["--channel", "stderr"],
            result_dir=str(tmp_path / "results"),
        )
        buffer = LineBuffer("gi st", 5)
        buffer.trigger(invoker, ["--replace", "status"])
        assert buffer.state == LineState(text="gi status", point=9)
        assert list((tmp_path / "results").iterdir()) == []

    def test_invalid_point_rejected_by_process(self, reference_process: str) -> None:
        invoker = Invoker(reference_process, timeout=30)
        outcome = invoker.request_completion(LineState(text="ab", point=2), ["--point=9"])
        # The later --point wins inside the process; it rejects the request.
        assert isinstance(outcome.error, NonZeroExit)
        assert outcome.state == LineState(text="ab", point=2)


class TestScenarios:
    def test_completion_replaces_line(self, make_process: Callable[..., str]) -> None:
        exe = make_process("print('5 git status')")
        buffer = LineBuffer("gi st", 2)
        buffer.trigger(Invoker(exe, timeout=10))
        assert buffer.state == LineState(text="git status", point=5)

    def test_failing_process_leaves_empty_line(self, make_process: Callable[..., str]) -> None:
        exe = make_process("sys.exit(1)")
        buffer = LineBuffer("", 0)
        outcome = buffer.trigger(Invoker(exe, timeout=10))
        assert isinstance(outcome.error, NonZeroExit)
        assert buffer.state == LineState(text="", point=0)

    def test_hanging_process_times_out(
        self, make_process: Callable[..., str], tmp_path: Path
    ) -> None:
        pid_file = tmp_path / "pid"
        exe = make_process(
            f"""
            import os, time
            with open({str(pid_file)!r}, "w") as f:
                f.write(str(os.getpid()))
            time.sleep(60)
            """
        )
        buffer = LineBuffer("gi st", 2)
        started = time.monotonic()
        outcome = buffer.trigger(Invoker(exe, timeout=1.0))
        assert time.monotonic() - started < 15
        assert isinstance(outcome.error, ProcessTimeout)
        assert buffer.state == LineState(text="gi st", point=2)

        pid = int(pid_file.read_text())
        with pytest.raises(ProcessLookupError):
            os.kill(pid, 0)
