"""
Exception types for charts-live.

Provisioning and binding errors fail the requested operation and are
reported to the caller. Watcher and per-client errors are contained by the
serving core and only logged.
"""

from pathlib import Path
from typing import Iterable, List, Optional


class ChartsLiveError(Exception):
    """Base class for all charts-live errors."""

    error_type = "charts_live_error"


class UnsupportedLibraryError(ChartsLiveError):
    """Requested chart library id is not known."""

    error_type = "unsupported_library"

    def __init__(self, library_id: str, supported: Iterable[str]):
        self.library_id = library_id
        self.supported: List[str] = list(supported)
        super().__init__(
            f"Unsupported chart library: {library_id}. "
            f"Supported: {', '.join(self.supported)}"
        )


class PortBindError(ChartsLiveError):
    """The HTTP listener could not bind its socket."""

    error_type = "port_bind_error"

    def __init__(self, host: str, port: int, cause: Optional[BaseException] = None):
        self.host = host
        self.port = port
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Cannot listen on {host}:{port}{detail}")


class WatchInitError(ChartsLiveError):
    """The file watcher could not be set up for a directory."""

    error_type = "watch_init_error"

    def __init__(self, directory: Path, reason: str):
        self.directory = directory
        self.reason = reason
        super().__init__(f"Cannot watch {directory}: {reason}")


class ClientWriteError(ChartsLiveError):
    """Writing an event to one SSE client failed."""

    error_type = "client_write_error"

    def __init__(self, index: int, cause: BaseException):
        self.index = index
        self.cause = cause
        super().__init__(f"Error sending to client {index}: {cause!r}")


class WorkspaceNotInitializedError(ChartsLiveError):
    """A command needed a workspace but none has been provisioned yet."""

    error_type = "workspace_not_initialized"

    def __init__(self):
        super().__init__("No workspace initialized. Call initialize_wk first.")


class InvalidArgumentsError(ChartsLiveError):
    """A command was called with missing or malformed arguments."""

    error_type = "validation_error"


class CommandFailedError(ChartsLiveError):
    """Raised at the MCP boundary to mark a tool result as an error."""

    error_type = "command_failed"
