"""
hubtrack CLI entry point.
"""

import click

from hubtrack.config.app import load_config
from hubtrack.utils.logging import setup_logging

from .init import init
from .replay import replay
from .serve import mcp_server, serve
from .tasks import check, complete, progress, start


@click.group()
@click.option(
    "--config",
    type=click.Path(exists=True),
    help="Path to custom configuration file",
)
@click.option("--hub-url", help="Override the Hub API base URL")
@click.option("--verbose", "-v", is_flag=True, help="Also log to stderr")
@click.pass_context
def cli(ctx: click.Context, config: str | None, hub_url: str | None, verbose: bool) -> None:
    """hubtrack - Report agent sessions to the Hub as tracked tasks."""
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = load_config(config, cli_overrides={"hub.url": hub_url})
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    setup_logging(ctx.obj["config"].logging, verbose=verbose)


cli.add_command(init)
cli.add_command(serve)
cli.add_command(mcp_server)
cli.add_command(replay)
cli.add_command(start)
cli.add_command(progress)
cli.add_command(complete)
cli.add_command(check)


def main() -> None:
    cli(obj={})
