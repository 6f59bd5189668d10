"""MCP server implementation for MCP Git Blame."""

import asyncio
from typing import Any

from loguru import logger
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, TextContent, Tool

from ..config.defaults import SERVER_NAME
from ..config.settings import ServerSettings
from ..core.service import GitHistoryService
from ..utils.logging import configure_logging
from .blame_handlers import BlameHandlers
from .tool_schemas import get_tool_schemas


class GitBlameMCPServer:
    """MCP server exposing git blame and commit detail tools.

    The server holds no repository: each call names a file, and the repository
    containing that file answers it.
    """

    def __init__(
        self,
        settings: ServerSettings | None = None,
        service: GitHistoryService | None = None,
    ):
        """Initialize the MCP server.

        Args:
            settings: Server settings. If None, defaults are used.
            service: History service. If None, one is built from ``settings``.
        """
        self.settings = settings or ServerSettings()
        self.service = service or GitHistoryService(self.settings)
        self.blame_handlers = BlameHandlers(self.service)

    def get_tools(self) -> list[Tool]:
        """Get available MCP tools."""
        return get_tool_schemas()

    async def call_tool(
        self, name: str, arguments: dict[str, Any] | None
    ) -> CallToolResult:
        """Dispatch a tool call to its handler."""
        args = arguments or {}

        if name == "git_blame":
            return await self.blame_handlers.handle_git_blame(args)
        if name == "git_commit_detail":
            return await self.blame_handlers.handle_git_commit_detail(args)

        logger.warning(f"Unknown tool requested: {name}")
        return CallToolResult(
            content=[TextContent(type="text", text=f"Unknown tool: {name}")],
            isError=True,
        )


def create_mcp_server(settings: ServerSettings | None = None) -> Server:
    """Create and configure the MCP server."""
    server = Server(SERVER_NAME)
    mcp_server = GitBlameMCPServer(settings)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List available tools."""
        return mcp_server.get_tools()

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> CallToolResult:
        """Handle tool calls."""
        return await mcp_server.call_tool(name, arguments)

    return server


async def run_mcp_server(settings: ServerSettings | None = None) -> None:
    """Run the MCP server using stdio transport."""
    settings = settings or ServerSettings.from_env()
    configure_logging(settings)

    server = create_mcp_server(settings)
    logger.info(f"{SERVER_NAME} server running on stdio")

    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream, write_stream, server.create_initialization_options()
            )
    except Exception as e:
        logger.error(f"Server failed: {e}")
        raise


if __name__ == "__main__":
    asyncio.run(run_mcp_server())
