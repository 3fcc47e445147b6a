"""
Server commands: HTTP event ingest and stdio MCP.
"""

import asyncio
import logging
import sys

import click
import uvicorn

from hubtrack.config.app import HubTrackConfig
from hubtrack.servers.http import HTTPServer
from hubtrack.sessions.tracker import SessionTracker

logger = logging.getLogger(__name__)


@click.command()
@click.option("--host", help="Interface to bind (default: server.host from config)")
@click.option("--port", type=int, help="Port to listen on (default: server.port from config)")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None) -> None:
    """
    Run the HTTP event ingest server.

    A host plugin forwards each session event with POST /events; the
    tracker reports the session to the Hub.
    """
    config: HubTrackConfig = ctx.obj["config"]
    server = HTTPServer(
        SessionTracker.from_config(config),
        host=host or config.server.host,
        port=port or config.server.port,
    )

    click.echo(f"Listening on http://{server.host}:{server.port} (Hub: {config.hub.url})")
    uvicorn_config = uvicorn.Config(
        server.app,
        host=server.host,
        port=server.port,
        log_level="warning",
        access_log=False,
    )
    asyncio.run(uvicorn.Server(uvicorn_config).serve())


@click.command("mcp-server")
@click.pass_context
def mcp_server(ctx: click.Context) -> None:
    """
    Run stdio MCP server with the manual Hub tools.

    Example usage:
      opencode mcp add hubtrack -- hubtrack mcp-server
    """
    from hubtrack.mcp_proxy.stdio import main as mcp_main

    try:
        asyncio.run(mcp_main(ctx.obj["config"]))
    except Exception as e:
        logger.error(f"MCP server failed: {e}")
        sys.exit(1)
