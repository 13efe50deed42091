"""Config commands -- view and modify global configuration.

Provides the ``completers config`` sub-command group for reading,
updating, and resetting the user's global configuration file
(:class:`~completers.models.GlobalConfig`). Settings control which
completion process is run, how its result is delivered, and its timeout.
"""

from __future__ import annotations

import shlex
from typing import Any

import typer

from completers.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


def _coerce(key: str, current: Any, value: str) -> Any:
    """Coerce *value* to the type of the field's *current* value."""
    if isinstance(current, bool):
        return value.lower() in ("true", "1", "yes")
    if isinstance(current, float):
        try:
            return float(value)
        except ValueError:
            error(f"Expected number for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    if isinstance(current, list):
        return shlex.split(value)
    return value


@config_app.command("show")
def config_show() -> None:
    """Show current configuration.

    Prints the config file path on stderr and the stored configuration on
    stdout.

    Example::

        completers config show
    """
    from completers.config import global_config_path, load_global_config

    config = load_global_config()
    info(f"Config file: {global_config_path()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'invoker.timeout')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. The value is coerced to match the
    existing field's type; list fields are split like a shell command line.
    The updated config is validated before saving.

    Example::

        completers config set invoker.executable /opt/completers/bin/completers
        completers config set invoker.channel file
        completers config set invoker.timeout 0.5
        completers config set invoker.args "--mode git"
    """
    from completers.config import load_global_config, save_global_config
    from completers.models import GlobalConfig

    data = load_global_config().model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    coerced = _coerce(key, target[final_key], value)
    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset configuration to defaults.

    Asks for confirmation unless ``--force`` is given.
    """
    from completers.config import save_global_config
    from completers.models import GlobalConfig

    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
