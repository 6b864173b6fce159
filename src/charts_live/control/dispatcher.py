"""
Command dispatcher for charts-live.

Maps named commands onto the workspace provisioner and the serving
core. Every command returns a CommandResult; exceptions never cross the
dispatch boundary.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from ..errors import WorkspaceNotInitializedError
from ..server import LiveReloadServer
from ..workspace import WorkspaceProvisioner
from .base import CommandResult, handle_exceptions, validate_args

logger = logging.getLogger(__name__)

_NO_ARGUMENTS = {"type": "object", "properties": {}}

COMMAND_DEFINITIONS: List[Dict[str, Any]] = [
    {
        "name": "get_supported_charts_libs",
        "description": "Returns metadata about supported charting libraries with usage instructions",
        "input_schema": _NO_ARGUMENTS,
    },
    {
        "name": "initialize_wk",
        "description": (
            "Initialize a workspace for a specific charting library. "
            "Creates files and starts HTTP server."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "chart_lib_id": {
                    "type": "string",
                    "description": 'ID of the charting library (e.g., "amcharts")',
                },
            },
            "required": ["chart_lib_id"],
        },
    },
    {
        "name": "get_wk_path",
        "description": "Returns the absolute path of the current workspace folder",
        "input_schema": _NO_ARGUMENTS,
    },
    {
        "name": "refresh",
        "description": "Triggers a reload of the chart viewer in the browser",
        "input_schema": _NO_ARGUMENTS,
    },
    {
        "name": "server_status",
        "description": "Reports the served workspace, connected viewers and listener details",
        "input_schema": _NO_ARGUMENTS,
    },
]


class CommandDispatcher:
    """
    Routes command invocations to their handlers.

    Owns no state of its own; the provisioner and server passed in are
    the single active session.
    """

    def __init__(self, provisioner: WorkspaceProvisioner, server: LiveReloadServer):
        """
        Initialize the dispatcher.

        Args:
            provisioner: Creates workspaces
            server: Serves the active workspace
        """
        self.provisioner = provisioner
        self.server = server
        self._commands = self._build_command_registry()

    def _build_command_registry(self) -> Dict[str, Callable[[Dict[str, Any]], Awaitable[CommandResult]]]:
        return {
            "get_supported_charts_libs": self.get_supported_libraries,
            "initialize_wk": self.initialize_workspace,
            "get_wk_path": self.get_workspace_path,
            "refresh": self.refresh,
            "server_status": self.server_status,
        }

    def command_names(self) -> List[str]:
        return list(self._commands)

    async def dispatch(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> CommandResult:
        """
        Run a command by name.

        Args:
            name: Command name
            arguments: Command arguments (may be None)

        Returns:
            Result of the command, or an error result
        """
        handler = self._commands.get(name)
        if handler is None:
            logger.warning(f"Unknown command: {name}")
            return CommandResult.error(f"Unknown tool: {name}", error_type="unknown_command")

        if arguments is not None and not isinstance(arguments, dict):
            return CommandResult.error("Command arguments must be an object", error_type="validation_error")

        logger.debug(f"Dispatching {name} {arguments or {}}")
        return await handler(arguments or {})

    @handle_exceptions
    async def get_supported_libraries(self, arguments: Dict[str, Any]) -> CommandResult:
        return CommandResult.ok(libraries=self.provisioner.list_supported())

    @handle_exceptions
    @validate_args("chart_lib_id")
    async def initialize_workspace(self, arguments: Dict[str, Any]) -> CommandResult:
        chart_lib_id = arguments["chart_lib_id"]

        workspace = await self.provisioner.provision(chart_lib_id)
        await self.server.start(workspace)

        url = self.server.url
        return CommandResult.ok(
            success=True,
            workspace_path=str(workspace),
            url=url,
            live_reload=self.server.state.live_reload,
            message=f"Workspace initialized for {chart_lib_id}. Open browser at {url}",
        )

    @handle_exceptions
    async def get_workspace_path(self, arguments: Dict[str, Any]) -> CommandResult:
        workspace = self.provisioner.current_workspace
        if workspace is None:
            raise WorkspaceNotInitializedError()
        return CommandResult.ok(workspace_path=str(workspace))

    @handle_exceptions
    async def refresh(self, arguments: Dict[str, Any]) -> CommandResult:
        delivered = await self.server.broadcast_reload()
        return CommandResult.ok(
            success=True,
            clients=delivered,
            message="Reload signal sent to all connected clients",
        )

    @handle_exceptions
    async def server_status(self, arguments: Dict[str, Any]) -> CommandResult:
        return CommandResult.ok(**self.server.describe())
