"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for completers:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.completers/`` on macOS and Windows. See :func:`get_config_dir`
  and :func:`get_data_dir`.
* **Global config** -- A single :class:`~completers.models.GlobalConfig`
  JSON file storing which completion process to run, how its result is
  delivered, and its timeout.
* **Project config** -- An optional ``./completers.json`` whose
  ``invoker`` section overrides the global one for a working directory.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config into the
  final effective configuration.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from completers.exceptions import ConfigError
from completers.models import GlobalConfig

_APP_NAME = "completers"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "completers.json"
_PROCESS_LOG_FILENAME = "completers-process.log"

ENV_EXECUTABLE = "COMPLETERS_EXECUTABLE"
ENV_CHANNEL = "COMPLETERS_CHANNEL"
ENV_TIMEOUT = "COMPLETERS_TIMEOUT"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/completers/`` (default ``~/.config/completers/``).
    On macOS/Windows: ``~/.completers/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (logs, crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/completers/`` (default ``~/.local/share/completers/``).
    On macOS/Windows: ``~/.completers/data/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_logs_dir() -> Path:
    """Return ``<data_dir>/logs/``, creating it if necessary."""
    path = get_data_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def default_process_log_file() -> Path:
    """Log file used by the reference completion process when none is configured."""
    return get_logs_dir() / _PROCESS_LOG_FILENAME


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is removed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~completers.models.GlobalConfig`, or a
        default instance if the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./completers.json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Project config at {path} must be a JSON object")
    return data


# --- Precedence resolution ---


def _merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge *overrides* into a copy of *base*."""
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def resolve_config(
    cli_executable: Optional[str] = None,
    cli_channel: Optional[str] = None,
    cli_timeout: Optional[float] = None,
) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_executable``, ``cli_channel``, ``cli_timeout``)
        2. Environment variables (``COMPLETERS_EXECUTABLE``,
           ``COMPLETERS_CHANNEL``, ``COMPLETERS_TIMEOUT``)
        3. Project config (``./completers.json``)
        4. User config (``~/.config/completers/config.json``)
        5. Defaults

    Returns:
        The effective :class:`~completers.models.GlobalConfig`.

    Raises:
        ConfigError: If any layer supplies an invalid value.
    """
    # 5 + 4
    data = load_global_config().model_dump(mode="json")

    # 3
    project = load_project_config()
    if project is not None:
        data = _merge(data, project)

    # 2
    invoker = data.setdefault("invoker", {})
    env_executable = os.environ.get(ENV_EXECUTABLE)
    if env_executable:
        invoker["executable"] = env_executable
    env_channel = os.environ.get(ENV_CHANNEL)
    if env_channel:
        invoker["channel"] = env_channel
    env_timeout = os.environ.get(ENV_TIMEOUT)
    if env_timeout:
        invoker["timeout"] = env_timeout

    # 1
    if cli_executable is not None:
        invoker["executable"] = cli_executable
    if cli_channel is not None:
        invoker["channel"] = cli_channel
    if cli_timeout is not None:
        invoker["timeout"] = cli_timeout

    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
