"""
Configuration initialization command.
"""

import sys

import click

from hubtrack.config.app import DEFAULT_CONFIG_FILE, write_default_config


@click.command()
@click.argument("path", required=False, default=DEFAULT_CONFIG_FILE)
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing config file")
def init(path: str, force: bool) -> None:
    """Write a config file with every default to PATH (default: ~/.hubtrack/config.yaml)."""
    try:
        written = write_default_config(path, force=force)
    except FileExistsError as e:
        click.echo(f"{e} (use --force to overwrite)", err=True)
        sys.exit(1)
    except OSError as e:
        click.echo(f"Failed to write config: {e}", err=True)
        sys.exit(1)

    click.echo(f"Wrote default config to {written}")
