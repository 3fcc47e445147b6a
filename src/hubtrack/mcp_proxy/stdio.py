"""
Stdio MCP server implementation.

Exposes the tracker's manual override operations as MCP tools so an agent
(or the operator driving it) can correct Hub tracking by hand.
"""

import logging

from mcp.server.fastmcp import FastMCP

from hubtrack.config.app import HubTrackConfig, load_config
from hubtrack.sessions.tracker import SessionTracker

__all__ = ["create_stdio_mcp_server", "main"]

logger = logging.getLogger("hubtrack.mcp.stdio")


def create_stdio_mcp_server(
    config: HubTrackConfig | None = None,
    tracker: SessionTracker | None = None,
) -> FastMCP:
    """Create stdio MCP server with the hub_* tools."""
    config = config or load_config()
    tracker = tracker or SessionTracker.from_config(config)

    mcp = FastMCP("hubtrack")

    @mcp.tool()
    async def hub_start(content: str, target_agent: str | None = None) -> str:
        """
        Manually start tracking a new task in the Hub.

        Use this when automatic tracking doesn't capture the task correctly.
        Returns the messageId for subsequent hub_progress/hub_complete calls.

        Args:
            content: Description of the task being started
            target_agent: Target agent (default: 'user')
        """
        return await tracker.start(content, target_agent)

    @mcp.tool()
    async def hub_progress(parent_message_id: int, content: str) -> str:
        """
        Send a progress update for an active task.

        Args:
            parent_message_id: The messageId from the start call
            content: Progress update content
        """
        return await tracker.progress(parent_message_id, content)

    @mcp.tool()
    async def hub_complete(parent_message_id: int, content: str) -> str:
        """
        Mark a task as complete.

        Args:
            parent_message_id: The messageId from the start call
            content: Completion summary - what was accomplished
        """
        return await tracker.complete(parent_message_id, content)

    @mcp.tool()
    async def hub_check(agent: str | None = None) -> str:
        """
        Check for pending messages from the Hub.

        Returns messages that need attention from the specified agent.

        Args:
            agent: Agent to check pending for (default: 'opencode')
        """
        return await tracker.check_pending(agent)

    return mcp


async def main(config: HubTrackConfig | None = None) -> None:
    """Main entry point for stdio MCP server."""
    mcp = create_stdio_mcp_server(config)
    logger.info("hubtrack MCP server running on stdio")
    await mcp.run_stdio_async()
