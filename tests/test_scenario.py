"""
End-to-end flow: provision a workspace through the dispatcher, serve it,
subscribe a browser-like client and push a reload.
"""

import asyncio

import aiohttp
import pytest

from charts_live.control import CommandDispatcher
from charts_live.server import LiveReloadServer
from charts_live.workspace import WorkspaceProvisioner


async def read_frame(response):
    return await asyncio.wait_for(response.content.readuntil(b"\n\n"), 3.0)


@pytest.mark.asyncio
async def test_initialize_serve_and_refresh(tmp_path):
    server = LiveReloadServer(host="127.0.0.1", port=0, keepalive_interval=60.0)
    provisioner = WorkspaceProvisioner(tmp_path / "workspaces")
    dispatcher = CommandDispatcher(provisioner, server)

    try:
        init = await dispatcher.dispatch("initialize_wk", {"chart_lib_id": "chartjs"})
        assert init.success, init.error_message
        workspace = init.payload["workspace_path"]

        async with aiohttp.ClientSession() as session:
            async with session.get(f"{server.url}/health") as resp:
                assert await resp.json() == {"status": "ok", "clients": 0, "workspace": workspace}

            async with session.get(f"{server.url}/") as resp:
                assert "Chart.js Visualization" in await resp.text()

            async with session.get(f"{server.url}/events") as events:
                assert await read_frame(events) == b"data: connected\n\n"

                refresh = await dispatcher.dispatch("refresh")
                assert refresh.success
                assert refresh.payload["clients"] == 1
                assert await read_frame(events) == b"data: reload\n\n"

        path = await dispatcher.dispatch("get_wk_path")
        assert path.payload["workspace_path"] == workspace
    finally:
        await server.stop()


@pytest.mark.asyncio
async def test_unknown_library_lists_supported(tmp_path):
    server = LiveReloadServer(host="127.0.0.1", port=0)
    dispatcher = CommandDispatcher(WorkspaceProvisioner(tmp_path), server)

    result = await dispatcher.dispatch("initialize_wk", {"chart_lib_id": "unknown-lib"})

    assert result.success is False
    assert result.to_dict()["supported"] == ["amcharts", "chartjs"]
    assert not server.is_running()
