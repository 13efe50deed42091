"""Tests for completers.invoker.LineBuffer -- atomic, generation-checked updates."""

from __future__ import annotations

import os
import threading
import time
from pathlib import Path
from typing import Callable

import pytest

from completers.exceptions import (
    CompletionBusy,
    NonZeroExit,
    ProcessLaunchFailure,
    ProcessTimeout,
)
from completers.invoker import Invoker, LineBuffer
from completers.models import LineState
from completers.output import OutputManager, set_output


@pytest.fixture(autouse=True)
def _colourless_output() -> None:
    set_output(OutputManager(no_color=True))


class TestLineBufferState:
    def test_initial_state(self) -> None:
        buffer = LineBuffer("gi st", 2)
        assert buffer.state == LineState(text="gi st", point=2)
        assert buffer.generation == 0

    def test_invalid_initial_point(self) -> None:
        with pytest.raises(ValueError):
            LineBuffer("abc", 5)

    def test_edit_bumps_generation(self) -> None:
        buffer = LineBuffer()
        buffer.edit(LineState(text="a", point=1))
        assert buffer.snapshot() == (LineState(text="a", point=1), 1)

    def test_apply_current_generation(self) -> None:
        buffer = LineBuffer("gi st", 2)
        _, generation = buffer.snapshot()
        assert buffer.apply(LineState(text="git status", point=5), generation)
        assert buffer.state == LineState(text="git status", point=5)

    def test_apply_stale_generation_is_dropped(self) -> None:
        buffer = LineBuffer("gi st", 2)
        _, generation = buffer.snapshot()
        buffer.edit(LineState(text="gi sta", point=6))
        assert not buffer.apply(LineState(text="git status", point=5), generation)
        assert buffer.state == LineState(text="gi sta", point=6)


class TestTrigger:
    def test_scenario_completion_applied(self, make_process: Callable[..., str]) -> None:
        exe = make_process("print('5 git status')")
        buffer = LineBuffer("gi st", 2)
        outcome = buffer.trigger(Invoker(exe, timeout=10))
        assert outcome.ok
        assert buffer.state == LineState(text="git status", point=5)

    def test_echo_leaves_line_identical(self, echo_process: str) -> None:
        buffer = LineBuffer("ls -la /tmp", 6)
        buffer.trigger(Invoker(echo_process, timeout=10))
        assert buffer.state == LineState(text="ls -la /tmp", point=6)

    def test_scenario_nonzero_exit_without_output(
        self, make_process: Callable[..., str], capsys: pytest.CaptureFixture[str]
    ) -> None:
        exe = make_process("sys.exit(1)")
        buffer = LineBuffer("", 0)
        outcome = buffer.trigger(Invoker(exe, timeout=10))
        assert isinstance(outcome.error, NonZeroExit)
        assert buffer.state == LineState(text="", point=0)
        assert buffer.generation == 0
        assert "Completion unavailable" in capsys.readouterr().err

    def test_nonzero_exit_after_record_leaves_buffer(
        self, make_process: Callable[..., str]
    ) -> None:
        exe = make_process(
            """
            print("5 git status", flush=True)
            sys.exit(2)
            """
        )
        buffer = LineBuffer("gi st", 2)
        buffer.trigger(Invoker(exe, timeout=10))
        assert buffer.state == LineState(text="gi st", point=2)

    def test_missing_process_is_not_fatal(self) -> None:
        buffer = LineBuffer("gi st", 2)
        outcome = buffer.trigger(Invoker("/nonexistent/completers"))
        assert isinstance(outcome.error, ProcessLaunchFailure)
        assert buffer.state == LineState(text="gi st", point=2)
        # The session stays usable: a later trigger still works.
        buffer.edit(LineState(text="x", point=1))
        assert buffer.state.text == "x"

    @pytest.mark.skipif(not os.path.exists("/bin/sh"), reason="needs /bin/sh")
    def test_timeout_from_wrapper_script_returns_promptly(self, tmp_path: Path) -> None:
        wrapper = tmp_path / "wrapper.sh"
        wrapper.write_text("#!/bin/sh\nsleep 8 &\nwait\n", encoding="utf-8")
        wrapper.chmod(0o755)
        buffer = LineBuffer("gi st", 2)

        started = time.monotonic()
        outcome = buffer.trigger(Invoker(str(wrapper), timeout=0.5))
        assert time.monotonic() - started < 3
        assert isinstance(outcome.error, ProcessTimeout)
        assert buffer.state == LineState(text="gi st", point=2)

    def test_aux_args_forwarded(self, make_process: Callable[..., str]) -> None:
        exe = make_process("print(f'{len(sys.argv[-1])} ' + sys.argv[-1])")
        buffer = LineBuffer()
        buffer.trigger(Invoker(exe, timeout=10), ["hello"])
        assert buffer.state == LineState(text="hello", point=5)

    def test_late_result_does_not_overwrite_newer_edit(
        self, make_process: Callable[..., str]
    ) -> None:
        exe = make_process(
            """
            import time
            time.sleep(1)
            print("5 stale")
            """
        )
        invoker = Invoker(exe, timeout=10)
        buffer = LineBuffer("gi st", 2)
        worker = threading.Thread(target=buffer.trigger, args=(invoker,))
        worker.start()
        deadline = time.monotonic() + 5
        while not invoker.busy and time.monotonic() < deadline:
            time.sleep(0.01)

        buffer.edit(LineState(text="newer", point=5))
        worker.join(timeout=10)
        assert buffer.state == LineState(text="newer", point=5)

    def test_concurrent_trigger_rejected(self, make_process: Callable[..., str]) -> None:
        exe = make_process(
            """
            import time
            time.sleep(1)
            print("5 first")
            """
        )
        invoker = Invoker(exe, timeout=10)
        buffer = LineBuffer("gi st", 2)
        worker = threading.Thread(target=buffer.trigger, args=(invoker,))
        worker.start()
        deadline = time.monotonic() + 5
        while not invoker.busy and time.monotonic() < deadline:
            time.sleep(0.01)

        outcome = buffer.trigger(invoker)
        worker.join(timeout=10)
        assert isinstance(outcome.error, CompletionBusy)
        assert buffer.state == LineState(text="first", point=5)
