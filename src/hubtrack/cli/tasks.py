"""
Manual Hub task commands.

One-shot counterparts of the hub_* MCP tools for use from a shell.
"""

import asyncio
import sys

import click

from hubtrack.config.app import HubTrackConfig
from hubtrack.hub.client import TaskId
from hubtrack.sessions.tracker import SessionTracker


def get_tracker(ctx: click.Context) -> SessionTracker:
    """Build a tracker from the loaded configuration."""
    config: HubTrackConfig = ctx.obj["config"]
    return SessionTracker.from_config(config)


def parse_task_id(value: str) -> TaskId:
    """Hub messageIds are numeric; pass anything else through as-is."""
    return int(value) if value.isdigit() else value


def _report(message: str) -> None:
    click.echo(message)
    if message.startswith("Failed"):
        sys.exit(1)


@click.command()
@click.argument("content")
@click.option("--target-agent", "-t", help="Target agent (default: hub.default_target_agent)")
@click.pass_context
def start(ctx: click.Context, content: str, target_agent: str | None) -> None:
    """Start tracking a new task in the Hub."""
    tracker = get_tracker(ctx)
    _report(asyncio.run(tracker.start(content, target_agent)))


@click.command()
@click.argument("task_id")
@click.argument("content")
@click.pass_context
def progress(ctx: click.Context, task_id: str, content: str) -> None:
    """Send a progress update for TASK_ID (the messageId from start)."""
    tracker = get_tracker(ctx)
    _report(asyncio.run(tracker.progress(parse_task_id(task_id), content)))


@click.command()
@click.argument("task_id")
@click.argument("content")
@click.pass_context
def complete(ctx: click.Context, task_id: str, content: str) -> None:
    """Mark TASK_ID as complete with a summary."""
    tracker = get_tracker(ctx)
    _report(asyncio.run(tracker.complete(parse_task_id(task_id), content)))


@click.command()
@click.argument("agent", required=False)
@click.pass_context
def check(ctx: click.Context, agent: str | None) -> None:
    """List messages pending in the Hub for AGENT (default: hub.pending_agent)."""
    tracker = get_tracker(ctx)
    _report(asyncio.run(tracker.check_pending(agent)))
