"""
Serving core for chart workspaces.

This module provides:
- HTTP server with static files, SSE live reload and a health endpoint
- File watcher that triggers reloads when workspace files are saved
"""

from .constants import ServerConstants, SessionPhase, WatchConstants
from .http_server import LiveReloadServer
from .state import ServerState
from .watcher import ChangeWatcher

__all__ = [
    "ChangeWatcher",
    "LiveReloadServer",
    "ServerConstants",
    "ServerState",
    "SessionPhase",
    "WatchConstants",
]
