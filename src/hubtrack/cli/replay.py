"""
Replay recorded session events through a tracker.
"""

import asyncio
import json
from typing import Any

import click

from hubtrack.config.app import HubTrackConfig
from hubtrack.sessions.tracker import SessionTracker


def read_events(lines: list[str]) -> tuple[list[dict[str, Any]], int]:
    """
    Parse JSON-lines events.

    Returns:
        Tuple of (events, number of lines skipped as blank or invalid)
    """
    events: list[dict[str, Any]] = []
    skipped = 0
    for line in lines:
        line = line.strip()
        if not line:
            continue
        try:
            event = json.loads(line)
        except json.JSONDecodeError:
            skipped += 1
            continue
        if isinstance(event, dict):
            events.append(event)
        else:
            skipped += 1
    return events, skipped


async def replay_events(tracker: SessionTracker, events: list[dict[str, Any]]) -> None:
    for event in events:
        await tracker.handle_event(event)


@click.command()
@click.argument("events_file", type=click.File("r"))
@click.pass_context
def replay(ctx: click.Context, events_file: Any) -> None:
    """
    Replay EVENTS_FILE (JSON lines, one OpenCode event per line) against the Hub.

    Events are processed in file order by a single tracker, exactly as the
    live plugin would have seen them. Use "-" to read from stdin.
    """
    config: HubTrackConfig = ctx.obj["config"]
    tracker = SessionTracker.from_config(config)

    events, skipped = read_events(events_file.readlines())
    asyncio.run(replay_events(tracker, events))

    click.echo(f"Replayed {len(events)} events ({skipped} skipped)")
    open_sessions = tracker.sessions.session_ids()
    if open_sessions:
        click.echo(f"Sessions still open: {', '.join(open_sessions)}")
