"""``cacheable config``: view and edit the global cache settings."""

from __future__ import annotations

import typer
from pydantic import ValidationError

from cacheable.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the current configuration."""
    from cacheable.config import get_config_dir, load_global_config

    info(f"Config directory: {get_config_dir()}")
    format_response(load_global_config().model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Setting in dot notation, e.g. 'cache.ttl_seconds'."),
    value: str = typer.Argument(help="New value; converted to the setting's type."),
) -> None:
    """Change one setting and save the config.

    Example::

        cacheable config set cache.ttl_seconds 600
        cacheable config set cache.enabled false
    """
    from cacheable.config import load_global_config, save_global_config
    from cacheable.models import GlobalConfig

    data = load_global_config().model_dump(mode="json")
    section, _, field = key.partition(".")
    if not isinstance(data.get(section), dict) or field not in data[section]:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    data[section][field] = value
    try:
        config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Invalid value for {key}: {exc.errors()[0]['msg']}")
        raise typer.Exit(code=2) from None

    save_global_config(config)
    success(f"Set {key} = {getattr(getattr(config, section), field)}")
