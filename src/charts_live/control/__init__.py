"""
Control surface for charts-live.

Named commands (initialize workspace, get path, refresh, status) routed
to the workspace provisioner and the serving core, plus the MCP stdio
server that exposes them as tools.
"""

from .base import CommandResult, handle_exceptions, validate_args
from .dispatcher import COMMAND_DEFINITIONS, CommandDispatcher

__all__ = [
    "COMMAND_DEFINITIONS",
    "CommandDispatcher",
    "CommandResult",
    "handle_exceptions",
    "validate_args",
]
