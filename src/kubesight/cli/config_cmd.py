# src/kubesight/cli/config_cmd.py
"""
Implements the `config` command group for the persisted settings file.
"""

import logging

import typer
import yaml
from typing_extensions import Annotated

from ..core.config import SETTABLE_KEYS, Settings, config, load_settings, save_settings, update_setting
from ..core.exceptions import ConfigurationError
from .utils import fail

logger = logging.getLogger(__name__)

app = typer.Typer(help="Show, change or reset the settings file.", add_completion=False)


@app.command()
def show():
    """
    Print the effective settings (file values or defaults) as YAML.
    """
    try:
        settings = load_settings()
    except ConfigurationError as e:
        raise fail(e)
    typer.echo(yaml.safe_dump(settings.model_dump(mode="json"), default_flow_style=False, sort_keys=False).rstrip())


@app.command()
def path():
    """
    Print the settings file location.
    """
    typer.echo(str(config.SETTINGS_PATH))


@app.command("set")
def set_value(
    key: Annotated[str, typer.Argument(help=f"One of: {', '.join(SETTABLE_KEYS)}.")],
    value: Annotated[str, typer.Argument(help="New value, validated before the file is written.")],
):
    """
    Change one setting, e.g. `config set pressure_thresholds.high 85`.
    """
    try:
        settings = update_setting(load_settings(), key, value)
        written = save_settings(settings)
    except ConfigurationError as e:
        raise fail(e)
    typer.echo("Configuration updated")
    typer.echo(f"  Config file: {written}")
    typer.echo(f"  {key} = {value}")


@app.command()
def reset():
    """
    Overwrite the settings file with default values.
    """
    settings = Settings()
    try:
        written = save_settings(settings)
    except ConfigurationError as e:
        raise fail(e)
    typer.echo(f"Configuration reset to defaults in: {written}")
    typer.echo(yaml.safe_dump(settings.model_dump(mode="json"), default_flow_style=False, sort_keys=False).rstrip())


@app.command()
def init(
    force: Annotated[bool, typer.Option("--force", help="Overwrite an existing settings file.")] = False,
):
    """
    Write a settings file with default values.
    """
    settings_path = config.SETTINGS_PATH
    if settings_path.exists() and not force:
        raise fail(f"Settings file {settings_path} already exists. Use --force to overwrite it.")

    try:
        written = save_settings(Settings(), settings_path)
    except ConfigurationError as e:
        raise fail(e)
    typer.echo(f"Settings written to: {written}")
