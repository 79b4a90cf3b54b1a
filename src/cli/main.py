"""CLI entry point for spendwatch."""

import sys
from pathlib import Path

import click

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from cli.commands import history, init, issue, purchase, reminder, stats
from cli.config import load_config_model
from cli.logging_config import setup_logging
from cli.utils import console


@click.group()
@click.version_option(version="0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """spendwatch - flag spending issues and get reminded before they repeat."""
    try:
        config = load_config_model()
    except ValueError as e:
        console.print(f"[red]Config error:[/] {e}")
        sys.exit(1)
    level = "DEBUG" if verbose else config.logging.level
    setup_logging(
        json_mode=config.logging.json_mode, level=level, log_file=config.logging.log_file
    )


cli.add_command(init)
cli.add_command(issue)
cli.add_command(reminder)
cli.add_command(purchase)
cli.add_command(history)
cli.add_command(stats)


if __name__ == "__main__":
    cli()
