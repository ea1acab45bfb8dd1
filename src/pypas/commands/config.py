"""``pypas config``: read and update the global configuration.

The global file (:class:`~pypas.models.GlobalConfig`) holds the default
profile, single-profile auto-selection and the default output format.
Keys use dot notation for nested sections, e.g. ``output.format``.
"""

from __future__ import annotations

from typing import Any

import typer

from pypas.commands._common import handle_errors
from pypas.exceptions import InvalidUsageError
from pypas.output import format_response, info, success

config_app = typer.Typer(no_args_is_help=True)

_NULLS = ("none", "null", "")


def _coerce(key: str, current: Any, value: str) -> Any:
    """Convert *value* to the type of the field it replaces."""
    if isinstance(current, bool):
        return value.lower() in ("true", "1", "yes")
    if isinstance(current, int):
        try:
            return int(value)
        except ValueError:
            raise InvalidUsageError(f"Expected integer for {key}, got: {value}") from None
    if value.lower() in _NULLS:
        return None
    return value


def _assign(data: dict[str, Any], key: str, value: str) -> Any:
    section = data
    *parents, leaf = key.split(".")
    for name in parents:
        if not isinstance(section.get(name), dict):
            raise InvalidUsageError(f"Invalid config key: {key}")
        section = section[name]
    if leaf not in section:
        raise InvalidUsageError(f"Unknown config key: {key}")
    section[leaf] = _coerce(key, section[leaf], value)
    return section[leaf]


@config_app.command("show")
def config_show() -> None:
    """Show the global configuration.

    Example::

        pypas --json config show
    """
    from pypas.config import get_config_dir, load_global_config

    with handle_errors():
        config = load_global_config()
    info(f"Config directory: {get_config_dir()}")
    format_response(config)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key (dot notation, e.g. 'output.format')."),
    value: str = typer.Argument(help="New value; 'none' clears optional keys."),
) -> None:
    """Set a configuration value.

    Example::

        pypas config set default_profile prod
        pypas config set output.format json
    """
    from pydantic import ValidationError

    from pypas.config import load_global_config, save_global_config
    from pypas.models import GlobalConfig

    with handle_errors():
        data = load_global_config().model_dump(mode="json")
        coerced = _assign(data, key, value)
        try:
            config = GlobalConfig.model_validate(data)
        except ValidationError as exc:
            raise InvalidUsageError(f"Invalid value for {key}: {exc.errors()[0]['msg']}") from None
        save_global_config(config)

    success(f"Set {key} = {coerced}")
