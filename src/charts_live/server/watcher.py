"""
File watcher for live-reloading a chart workspace.

This module provides:
- Filesystem monitoring for workspace content files (*.js, *.html, *.css)
- Write-finish debouncing so one save yields one notification
- An asyncio-friendly lifecycle whose close() is awaited to completion
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Awaitable, Callable, Iterable, Optional

from watchdog.events import (
    FileSystemEvent,
    FileSystemMovedEvent,
    PatternMatchingEventHandler,
)
from watchdog.observers import Observer

from ..errors import WatchInitError
from .constants import WatchConstants
from .utils.debouncer import WriteStabilizer

logger = logging.getLogger(__name__)


class WorkspaceFileHandler(PatternMatchingEventHandler):
    """
    Watchdog event handler for workspace content files.

    Runs on the observer thread and hands every matching write over to
    the asyncio loop. Directories and non-matching files are ignored.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        on_write: Callable[[Path], None],
        patterns: Iterable[str] = WatchConstants.PATTERNS,
    ):
        """
        Initialize the file handler.

        Args:
            loop: Event loop that owns the watcher
            on_write: Loop-side callback receiving the written path
            patterns: Glob patterns of files to monitor
        """
        self.watch_patterns = list(patterns)
        super().__init__(patterns=self.watch_patterns, ignore_directories=True)
        self.loop = loop
        self.on_write = on_write

    def on_modified(self, event: FileSystemEvent) -> None:
        self._forward(event.src_path)

    def on_created(self, event: FileSystemEvent) -> None:
        # A new content file reloads the page like an edit does; files
        # present before start() never produce a created event
        self._forward(event.src_path)

    def on_moved(self, event: FileSystemMovedEvent) -> None:
        # Editors that save atomically rename a temp file over the target
        dest = Path(os.fsdecode(event.dest_path))
        if any(dest.match(pattern) for pattern in self.watch_patterns):
            self._forward(event.dest_path)

    def _forward(self, raw_path) -> None:
        path = Path(os.fsdecode(raw_path))
        try:
            self.loop.call_soon_threadsafe(self.on_write, path)
        except RuntimeError:
            # Loop already closed during shutdown
            logger.debug(f"Dropped change for {path.name}: event loop is closed")


class ChangeWatcher:
    """
    Watches one workspace directory and reports settled content changes.

    Usage:
        async def on_change(file_name):
            print(f"Changed: {file_name}")

        watcher = ChangeWatcher(on_change)
        watcher.watch(Path("/path/to/workspace"))
        watcher.start()

        # Later...
        await watcher.close()
    """

    def __init__(
        self,
        on_change: Callable[[str], Awaitable[None]],
        on_error: Optional[Callable[[Exception], None]] = None,
        patterns: Iterable[str] = WatchConstants.PATTERNS,
        stability_threshold: float = WatchConstants.STABILITY_THRESHOLD_SECONDS,
        poll_interval: float = WatchConstants.POLL_INTERVAL_SECONDS,
    ):
        """
        Initialize the change watcher.

        Args:
            on_change: Async callback receiving the changed file's base name
            on_error: Callback for errors raised while handling a change
            patterns: Glob patterns of files to monitor
            stability_threshold: Quiet period before a write counts as finished
            poll_interval: Seconds between write stability checks
        """
        self.on_change = on_change
        self.on_error = on_error or self._log_error
        self.patterns = tuple(patterns)
        self.stabilizer = WriteStabilizer(stability_threshold, poll_interval)
        self.observer: Optional[Observer] = None
        self.watch_path: Optional[Path] = None

    def watch(self, path: Path) -> None:
        """
        Set the directory to watch.

        Args:
            path: Workspace directory

        Raises:
            WatchInitError: If the path is missing or not a directory
        """
        path = Path(path)
        if not path.exists():
            raise WatchInitError(path, "path does not exist")
        if not path.is_dir():
            raise WatchInitError(path, "path is not a directory")

        self.watch_path = path

    def start(self) -> None:
        """
        Start watching for file changes.

        Must be called from a running event loop. Only changes made after
        this call are reported.

        Raises:
            WatchInitError: If the observer backend cannot watch the directory
        """
        if not self.watch_path:
            raise RuntimeError("No watch path set. Call watch() first.")

        if self.is_running():
            raise RuntimeError("Watcher is already running")

        loop = asyncio.get_running_loop()
        handler = WorkspaceFileHandler(loop, self._on_write, self.patterns)

        observer = Observer()
        try:
            observer.schedule(handler, str(self.watch_path), recursive=False)
            observer.start()
        except OSError as e:
            raise WatchInitError(self.watch_path, str(e)) from e

        self.observer = observer
        logger.info(f"Watching for changes in: {self.watch_path}")

    def _on_write(self, path: Path) -> None:
        if not self.is_running():
            return
        self.stabilizer.notify(path, self._emit_change)

    async def _emit_change(self, path: Path) -> None:
        logger.info(f"File changed: {path.name}")
        try:
            await self.on_change(path.name)
        except Exception as e:
            self.on_error(e)

    @staticmethod
    def _log_error(error: Exception) -> None:
        logger.error(f"Watcher error: {error}", exc_info=error)

    async def close(self) -> None:
        """
        Stop watching and wait until the observer thread has exited.

        Safe to call when the watcher was never started.
        """
        await self.stabilizer.flush()

        observer = self.observer
        self.observer = None
        if observer is None:
            return

        observer.stop()
        await asyncio.get_running_loop().run_in_executor(None, observer.join)
        logger.info("File watcher stopped")

    def is_running(self) -> bool:
        """Check if the watcher is currently running."""
        return self.observer is not None and self.observer.is_alive()

    async def __aenter__(self):
        """Async context manager support."""
        self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager support."""
        await self.close()
