"""Shared test fixtures for completers.

Provides reusable fixtures for isolating configuration, resetting output
and logging state, running CLI commands, and writing fake completion
processes. These fixtures are automatically discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

import logging
import os
import sys
import textwrap
from pathlib import Path
from typing import Callable

import pytest

from completers.output import OutputManager, reset_output, set_output


SRC_DIR = Path(__file__).resolve().parent.parent / "src"


# ---------------------------------------------------------------------------
# Auto-reset global output and logging state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test, the cached references become stale once the test finishes.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _reset_logging_between_tests() -> None:
    """Drop handlers installed by ``setup_logging`` during a test."""
    yield
    logger = logging.getLogger("completers")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points the XDG directories at subdirectories of tmp_path, clears all
    COMPLETERS_* environment variables, changes the working directory to
    tmp_path, and makes the source tree importable from subprocesses.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("completers.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in [
        "COMPLETERS_EXECUTABLE",
        "COMPLETERS_CHANNEL",
        "COMPLETERS_TIMEOUT",
    ]:
        monkeypatch.delenv(var, raising=False)

    pythonpath = os.environ.get("PYTHONPATH")
    monkeypatch.setenv(
        "PYTHONPATH",
        str(SRC_DIR) + (os.pathsep + pythonpath if pythonpath else ""),
    )

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet, colourless output manager for the test."""
    output = OutputManager(no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Fake completion processes
# ---------------------------------------------------------------------------


ECHO_BODY = """
point = sys.argv[1].split("=", 1)[1]
print(f"{point} {sys.argv[2]}")
"""
"""Script body that answers with the request unchanged."""


@pytest.fixture
def make_process(tmp_path: Path) -> Callable[..., str]:
    """Factory writing executable Python scripts that act as completion processes.

    The script body runs after ``import sys`` with the request's argv in
    ``sys.argv``. Returns the script path.
    """

    def _make(body: str, name: str = "fake-completer") -> str:
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir(exist_ok=True)
        path = bin_dir / name
        path.write_text(
            f"#!{sys.executable}\nimport sys\n" + textwrap.dedent(body),
            encoding="utf-8",
        )
        path.chmod(0o755)
        return str(path)

    return _make


@pytest.fixture
def echo_process(make_process: Callable[..., str]) -> str:
    """A completion process that echoes its request."""
    return make_process(ECHO_BODY, name="echo-completer")


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
