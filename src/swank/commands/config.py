"""Config commands -- view and modify global configuration.

Provides the ``swank config`` sub-command group for reading, updating, and
resetting the user's global configuration file
(:class:`~swank.models.GlobalConfig`). Settings are persisted in the swank
config directory and control defaults such as path ordering, validator
mode, the schema base URL, and the schema cache.
"""

from __future__ import annotations

import typer
from pydantic import ValidationError

from swank.exit_codes import EXIT_INVALID_USAGE
from swank.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration.

    Prints the config directory path followed by the configuration
    resolved from environment, project, and global layers.

    Example::

        swank config show
        swank --json config show
    """
    from swank.config import get_config_dir, resolve_config
    from swank.exceptions import ConfigError

    try:
        config = resolve_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'schemas.base_url')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a global configuration value.

    Uses dot notation for nested keys. The value is coerced to match the
    existing field's type (bool or int); everything else is passed as a
    string and validated by :class:`~swank.models.GlobalConfig`, so enum
    fields such as ``order_paths`` reject unknown values.

    Raises:
        typer.Exit: With code 2 if the key path is invalid, the value
            cannot be coerced, or Pydantic validation fails.

    Example::

        swank config set order_paths method
        swank config set validator both
        swank config set cache.enabled true
        swank config set cache.ttl_seconds 3600
    """
    from swank.config import load_global_config, save_global_config
    from swank.exceptions import ConfigError
    from swank.models import GlobalConfig

    try:
        config = load_global_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=EXIT_INVALID_USAGE)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    current = target[final_key]
    coerced: object
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, int):
        try:
            coerced = int(value)
        except ValueError:
            error(f"Expected integer for {key}, got: {value}")
            raise typer.Exit(code=EXIT_INVALID_USAGE) from None
    else:
        coerced = value

    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    ctx: typer.Context,
) -> None:
    """Reset configuration to defaults.

    Replaces the persisted global config with a fresh
    :class:`~swank.models.GlobalConfig`. Asks for confirmation unless
    ``--force`` is active.

    Raises:
        typer.Exit: If the user declines confirmation.

    Example::

        swank config reset
        swank --force config reset
    """
    from swank.config import save_global_config
    from swank.models import GlobalConfig

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
