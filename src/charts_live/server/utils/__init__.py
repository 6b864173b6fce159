"""
Utilities package for the charts-live serving core.

Contains the write-finish debouncing used by the file watcher.
"""

from .debouncer import PendingWrite, WriteStabilizer

__all__ = [
    "PendingWrite",
    "WriteStabilizer",
]
