"""
Workspace package for charts-live.

Creates starter workspaces (index.html, chart.js, README.md) for the
supported charting libraries.
"""

from .libraries import SUPPORTED_LIBRARIES, ChartLibrary
from .provisioner import WorkspaceProvisioner

__all__ = [
    "ChartLibrary",
    "SUPPORTED_LIBRARIES",
    "WorkspaceProvisioner",
]
