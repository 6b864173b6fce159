"""
Constants for the charts-live serving core.

This module centralizes default values used by the HTTP server,
the SSE endpoint and the file watcher.
"""

from enum import Enum


class ServerConstants:
    """Defaults for the HTTP listener."""

    DEFAULT_HOST = "localhost"
    DEFAULT_PORT = 3000

    # Comment frame interval on idle SSE streams, also detects dead peers
    KEEPALIVE_INTERVAL_SECONDS = 15.0

    # Seconds aiohttp waits for in-flight handlers during shutdown
    SHUTDOWN_TIMEOUT_SECONDS = 5.0

    SSE_HEADERS = {
        "Content-Type": "text/event-stream",
        "Cache-Control": "no-cache",
        "Connection": "keep-alive",
        "Access-Control-Allow-Origin": "*",
    }

    INDEX_FILE = "index.html"


class WatchConstants:
    """Defaults for the workspace file watcher."""

    PATTERNS = ("*.js", "*.html", "*.css")

    # A write is finished once size/mtime stay unchanged this long
    STABILITY_THRESHOLD_SECONDS = 0.3
    POLL_INTERVAL_SECONDS = 0.1


class SessionPhase(str, Enum):
    """Lifecycle phase of a serving session."""

    STOPPED = "stopped"
    STARTING = "starting"
    LISTENING = "listening"
    STOPPING = "stopping"
