"""Config commands -- view and modify global configuration.

Provides the ``cfcli config`` sub-command group for reading, updating, and
resetting the user's global configuration file
(:class:`~cfcli.models.GlobalConfig`). Settings are persisted in the cfcli
config directory and control defaults such as the tree path, the API
endpoint, the token source and the account/zone identifiers.
"""

from __future__ import annotations

import typer
from pydantic import ValidationError

from cfcli.config import get_config_dir, load_global_config, save_global_config
from cfcli.exceptions import InvalidUsageError
from cfcli.models import GlobalConfig
from cfcli.output import info, print_json, success


config_app = typer.Typer(no_args_is_help=True)

# Fields that may be unset again with ``cfcli config set KEY none``.
_NULLABLE_KEYS = {"tree_path", "endpoint", "account_id", "zone_id"}


@config_app.command("show")
def config_show() -> None:
    """Show current configuration.

    Prints the config directory to stderr and the configuration as JSON to
    stdout.

    Example::

        cfcli config show
    """
    config = load_global_config()
    info(f"Config directory: {get_config_dir()}")
    print_json(config.model_dump(mode="json"), pretty=True)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'request.timeout')."
    ),
    value: str = typer.Argument(help="Value to set ('none' clears optional keys)."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. The value is coerced to match the
    existing field's type (bool, int, or str) and the result is validated
    against :class:`~cfcli.models.GlobalConfig` before saving.

    Raises:
        InvalidUsageError: If the key path is unknown, the value cannot be
            coerced, or validation fails.

    Example::

        cfcli config set zone_id 023e105f4ecef8ad9ca31a8372d0c353
        cfcli config set request.max_retries 4
        cfcli config set output.pretty true
    """
    config = load_global_config()
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            raise InvalidUsageError(f"Invalid config key: {key}")
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        raise InvalidUsageError(f"Unknown config key: {key}")

    current = target[final_key]
    coerced: object
    if key in _NULLABLE_KEYS and value.lower() == "none":
        coerced = None
    elif isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, int):
        try:
            coerced = int(value)
        except ValueError:
            raise InvalidUsageError(f"Expected integer for {key}, got: {value}") from None
    else:
        coerced = value

    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise InvalidUsageError(f"Validation error: {exc}") from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip the confirmation."),
) -> None:
    """Reset configuration to defaults.

    Replaces the persisted global config with a fresh
    :class:`~cfcli.models.GlobalConfig`. Asks for confirmation unless
    ``--force`` is given.

    Example::

        cfcli config reset --force
    """
    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
