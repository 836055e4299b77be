"""
Config command group for Retroplan.

Configuration is stored in .retroplan/config.json.
"""
import json
from pathlib import Path

import click

from retroplan.constants import (
    DEFAULT_DATA_DIR,
    ConfigManager,
    get_base_day_width,
    get_database_url,
    get_drag_threshold,
    get_edge_handle_width,
    get_storage_backend,
)
from retroplan.models.files import ConfigFile


def _effective_config(config: ConfigManager) -> ConfigFile:
    return ConfigFile(
        base_day_width=get_base_day_width(config),
        edge_handle_width=get_edge_handle_width(config),
        drag_threshold_px=get_drag_threshold(config),
        storage_backend=get_storage_backend(config),
        database_url=get_database_url(config),
    )


@click.group()
def config():
    """View and initialize planner configuration.

    Configuration is stored in .retroplan/config.json.
    """
    pass


@config.command(name="show")
def show_config():
    """Show the effective configuration."""
    manager = ConfigManager()
    click.echo(_effective_config(manager).model_dump_json(indent=2))
    if not manager.config_path.exists():
        click.echo(f"(defaults; {manager.config_path} does not exist)")


@config.command(name="init")
@click.option("--remote", is_flag=True, help="Store plans in a database instead of a local file.")
@click.option("--database-url", help="Database URL for remote storage.")
@click.option("--force", is_flag=True, help="Overwrite an existing config.json.")
def init_config(remote: bool, database_url: str, force: bool):
    """Write a config.json with default values."""
    data_dir = Path(DEFAULT_DATA_DIR)
    config_path = data_dir / "config.json"
    if config_path.exists() and not force:
        raise click.ClickException(f"{config_path} already exists. Use --force to overwrite.")

    values = ConfigFile()
    if remote:
        values = values.model_copy(update={"storage_backend": "remote"})
    if database_url:
        values = values.model_copy(update={"database_url": database_url})

    data_dir.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(values.model_dump(), indent=2), encoding="utf-8")
    click.echo(f"Configuration written to {config_path}.")
