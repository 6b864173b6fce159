import json
from importlib.metadata import version

import pytest
from unittest.mock import AsyncMock, MagicMock

from mcp.server import Server
from mcp.types import CallToolRequest, CallToolRequestParams, ListToolsRequest

from charts_live.control import CommandDispatcher
from charts_live.control.mcp_server import build_tool_definitions, create_mcp_server
from charts_live.server import LiveReloadServer
from charts_live.workspace import WorkspaceProvisioner


@pytest.fixture
def mcp_server(tmp_path):
    server = MagicMock(spec=LiveReloadServer)
    server.broadcast_reload = AsyncMock(return_value=0)
    dispatcher = CommandDispatcher(WorkspaceProvisioner(tmp_path), server)
    return create_mcp_server(dispatcher)


async def call(mcp_server, name, arguments=None):
    handler = mcp_server.request_handlers[CallToolRequest]
    request = CallToolRequest(
        method="tools/call",
        params=CallToolRequestParams(name=name, arguments=arguments or {}),
    )
    return (await handler(request)).root


def test_tool_definitions():
    """
    Test that every command is advertised with an object input schema.
    """
    tools = {tool.name: tool for tool in build_tool_definitions()}

    assert set(tools) == {
        "get_supported_charts_libs",
        "initialize_wk",
        "get_wk_path",
        "refresh",
        "server_status",
    }
    assert tools["initialize_wk"].inputSchema["required"] == ["chart_lib_id"]
    for tool in tools.values():
        assert tool.inputSchema["type"] == "object"


def test_sdk_major_version_has_low_level_decorators():
    """
    Test that the installed MCP SDK is the 1.x line with list_tools/call_tool.
    """
    assert version("mcp").split(".")[0] == "1"
    assert hasattr(Server, "list_tools")
    assert hasattr(Server, "call_tool")


@pytest.mark.asyncio
async def test_list_tools_handler(mcp_server):
    handler = mcp_server.request_handlers[ListToolsRequest]
    result = (await handler(ListToolsRequest(method="tools/list"))).root

    assert len(result.tools) == 5


@pytest.mark.asyncio
async def test_call_tool_success_returns_json_text(mcp_server):
    """
    Test that a successful command comes back as JSON text content.
    """
    result = await call(mcp_server, "refresh")

    assert not result.isError
    body = json.loads(result.content[0].text)
    assert body["success"] is True
    assert body["clients"] == 0


@pytest.mark.asyncio
async def test_call_tool_failure_is_tool_error(mcp_server):
    """
    Test that a failed command is flagged as an error with a JSON body.
    """
    result = await call(mcp_server, "get_wk_path")

    assert result.isError
    body = json.loads(result.content[0].text)
    assert body["error"] == "No workspace initialized. Call initialize_wk first."
