"""Mutable state of the serving core."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .constants import ServerConstants, SessionPhase


@dataclass
class ServerState:
    """
    State of the single serving session.

    Attributes:
        host: Interface the listener binds to
        port: Configured port (0 asks the OS for a free one)
        phase: Current lifecycle phase
        workspace: Directory being served, or None
        bound_port: Port actually bound while listening
        live_reload: Whether a watcher is attached to the session
    """
    host: str = ServerConstants.DEFAULT_HOST
    port: int = ServerConstants.DEFAULT_PORT
    phase: SessionPhase = SessionPhase.STOPPED
    workspace: Optional[Path] = None
    bound_port: Optional[int] = None
    live_reload: bool = False

    @property
    def listening(self) -> bool:
        return self.phase == SessionPhase.LISTENING

    def reset(self) -> None:
        """Return to the stopped state."""
        self.phase = SessionPhase.STOPPED
        self.workspace = None
        self.bound_port = None
        self.live_reload = False
