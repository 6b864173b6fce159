"""MCP stdio server exposing the charts-live commands as tools."""

import json
import logging
from typing import Any, Dict, List

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from ..errors import CommandFailedError
from .dispatcher import COMMAND_DEFINITIONS, CommandDispatcher

logger = logging.getLogger(__name__)

SERVER_NAME = "charts-live"


def build_tool_definitions() -> List[Tool]:
    """Build MCP tool descriptions for every dispatcher command."""
    return [
        Tool(
            name=definition["name"],
            description=definition["description"],
            inputSchema=definition["input_schema"],
        )
        for definition in COMMAND_DEFINITIONS
    ]


def create_mcp_server(dispatcher: CommandDispatcher) -> Server:
    """
    Create an MCP server whose tools call into ``dispatcher``.

    Failed commands raise CommandFailedError so the SDK reports the tool
    result with ``isError`` set; the message is the JSON error body.
    """
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        return build_tool_definitions()

    @server.call_tool()
    async def call_tool(name: str, arguments: Dict[str, Any]) -> List[TextContent]:
        result = await dispatcher.dispatch(name, arguments)
        text = json.dumps(result.to_dict(), indent=2)
        if not result.success:
            raise CommandFailedError(text)
        return [TextContent(type="text", text=text)]

    return server


async def run_stdio(dispatcher: CommandDispatcher) -> None:
    """
    Serve MCP over stdin/stdout until the client disconnects.

    The HTTP session is stopped on the way out.
    """
    server = create_mcp_server(dispatcher)
    logger.info("Charts MCP server running on stdio")
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        await dispatcher.server.stop()
