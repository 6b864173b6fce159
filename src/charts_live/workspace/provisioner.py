"""
Workspace provisioning for chart libraries.

This service creates a fresh directory of starter files for a chosen
charting library and remembers the most recent one.
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..errors import UnsupportedLibraryError
from ..server.constants import ServerConstants
from .libraries import SUPPORTED_LIBRARIES, ChartLibrary
from .templates import (
    CHART_JS,
    INDEX_HTML,
    README_MD,
    render_chart_js,
    render_index_html,
    render_readme,
)

logger = logging.getLogger(__name__)


class WorkspaceProvisioner:
    """
    Creates chart workspaces under a root directory.

    Each workspace is named ``<library id>-<epoch milliseconds>`` and
    holds index.html, chart.js and README.md.
    """

    def __init__(
        self,
        workspaces_root: Path,
        server_url: str = f"http://{ServerConstants.DEFAULT_HOST}:{ServerConstants.DEFAULT_PORT}",
    ):
        """
        Initialize the provisioner.

        Args:
            workspaces_root: Directory new workspaces are created in
            server_url: URL the workspace will be served at, for the README
        """
        self.workspaces_root = Path(workspaces_root).resolve()
        self.server_url = server_url
        self._current_workspace: Optional[Path] = None
        self.logger = logging.getLogger(f"{__name__}.WorkspaceProvisioner")

    def list_supported(self) -> List[Dict[str, Any]]:
        """Get metadata for every supported library."""
        return [library.to_dict() for library in SUPPORTED_LIBRARIES.values()]

    def supported_ids(self) -> List[str]:
        return list(SUPPORTED_LIBRARIES)

    def get_library(self, library_id: str) -> ChartLibrary:
        """
        Look up a library by id.

        Raises:
            UnsupportedLibraryError: If the id is unknown
        """
        library = SUPPORTED_LIBRARIES.get(library_id)
        if library is None:
            raise UnsupportedLibraryError(library_id, self.supported_ids())
        return library

    async def provision(self, library_id: str) -> Path:
        """
        Create a new workspace for a library.

        Args:
            library_id: Id of the charting library (e.g. "chartjs")

        Returns:
            Absolute path of the new workspace directory

        Raises:
            UnsupportedLibraryError: If the id is unknown
        """
        library = self.get_library(library_id)

        workspace = self.workspaces_root / f"{library.id}-{int(time.time() * 1000)}"
        await asyncio.to_thread(self._write_files, library, workspace)

        self._current_workspace = workspace
        self.logger.info(f"Created {library.name} workspace at {workspace}")
        return workspace

    def _write_files(self, library: ChartLibrary, workspace: Path) -> None:
        workspace.mkdir(parents=True, exist_ok=True)
        (workspace / INDEX_HTML).write_text(render_index_html(library), encoding="utf-8")
        (workspace / CHART_JS).write_text(render_chart_js(library), encoding="utf-8")
        (workspace / README_MD).write_text(
            render_readme(library, workspace, self.server_url), encoding="utf-8"
        )

    @property
    def current_workspace(self) -> Optional[Path]:
        """Most recently provisioned workspace, or None."""
        return self._current_workspace
