"""Init CLI command."""

from pathlib import Path

import click

from cli.config import DEFAULT_CONFIG_PATH, write_default_config
from cli.utils import console


@click.command()
@click.option(
    "--path",
    "config_path",
    type=click.Path(dir_okay=False),
    default=str(DEFAULT_CONFIG_PATH),
    show_default=True,
    help="Where to write the config file",
)
def init(config_path: str):
    """Write a default config file."""
    path = Path(config_path).expanduser()
    if write_default_config(path):
        console.print(f"[green]✓[/] Created config: {path}")
    else:
        console.print(f"[yellow]Config already exists:[/] {path}")
