"""
Write-finish debouncing for file change events.

A single save in an editor usually produces several filesystem events
(truncate, write, close, sometimes a rename). This module collapses such
a burst into one notification by waiting until the file has stopped
changing before calling the handler.
"""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Dict, Optional, Tuple
import time
import logging

from ..constants import WatchConstants

logger = logging.getLogger(__name__)

FileSignature = Tuple[int, int]


@dataclass
class PendingWrite:
    """
    A write that is waiting to settle.

    Attributes:
        path: File being written
        first_seen: Monotonic time of the first event in the burst
        last_event: Monotonic time of the most recent event in the burst
        pending_task: Task polling the file until it is stable
    """
    path: Path
    first_seen: float
    last_event: float
    pending_task: Optional[asyncio.Task] = None


class WriteStabilizer:
    """
    Coalesces bursts of write events per file.

    The first event for a path starts a polling task. The task checks the
    file's size and mtime every ``poll_interval`` seconds and calls the
    handler once both have been unchanged, with no new event, for
    ``stability_threshold`` seconds. Later events for the same path only
    restart the quiet window.

    Usage:
        stabilizer = WriteStabilizer(stability_threshold=0.3, poll_interval=0.1)

        # Called for every raw filesystem event (on the event loop)
        stabilizer.notify(Path("chart.js"), handler)
        stabilizer.notify(Path("chart.js"), handler)

        # handler(Path("chart.js")) runs once, after the file settles
    """

    def __init__(
        self,
        stability_threshold: float = WatchConstants.STABILITY_THRESHOLD_SECONDS,
        poll_interval: float = WatchConstants.POLL_INTERVAL_SECONDS,
    ):
        """
        Initialize the stabilizer.

        Args:
            stability_threshold: Quiet period in seconds before a write counts as finished
            poll_interval: Seconds between size/mtime checks
        """
        self.stability_threshold = stability_threshold
        self.poll_interval = poll_interval
        self.pending_writes: Dict[Path, PendingWrite] = {}
        self.logger = logging.getLogger(f"{__name__}.WriteStabilizer")

    def notify(self, path: Path, handler: Callable[[Path], Awaitable[None]]) -> None:
        """
        Record a write event for ``path``.

        Must be called from the event loop thread.

        Args:
            path: File that was written
            handler: Async function called with the path once the write settles
        """
        now = time.monotonic()

        existing = self.pending_writes.get(path)
        if existing and existing.pending_task and not existing.pending_task.done():
            existing.last_event = now
            return

        pending = PendingWrite(path=path, first_seen=now, last_event=now)
        pending.pending_task = asyncio.get_running_loop().create_task(
            self._await_write_finish(pending, handler)
        )
        self.pending_writes[path] = pending

    @staticmethod
    def _signature(path: Path) -> Optional[FileSignature]:
        try:
            stat = path.stat()
        except OSError:
            return None
        return stat.st_size, stat.st_mtime_ns

    async def _await_write_finish(
        self,
        pending: PendingWrite,
        handler: Callable[[Path], Awaitable[None]],
    ) -> None:
        """
        Poll the file until it is stable, then run the handler.

        Args:
            pending: The write being tracked
            handler: Handler to execute
        """
        path = pending.path
        try:
            last_signature = self._signature(path)
            stable_since = time.monotonic()

            while True:
                await asyncio.sleep(self.poll_interval)

                signature = self._signature(path)
                now = time.monotonic()

                if signature is None:
                    self.logger.debug(f"{path.name} disappeared before the write settled")
                    return

                if signature != last_signature or pending.last_event > stable_since:
                    last_signature = signature
                    stable_since = now
                    continue

                if now - stable_since >= self.stability_threshold:
                    break

            self.logger.debug(
                f"Write to {path.name} settled "
                f"(burst: {time.monotonic() - pending.first_seen:.3f}s)"
            )
            self._discard(pending)
            await handler(path)

        except asyncio.CancelledError:
            self.logger.debug(f"Pending write for {path.name} was cancelled")
            raise
        except Exception as e:
            self.logger.exception(f"Error handling settled write for {path.name}: {e}")
        finally:
            self._discard(pending)

    def _discard(self, pending: PendingWrite) -> None:
        if self.pending_writes.get(pending.path) is pending:
            del self.pending_writes[pending.path]

    async def flush(self) -> None:
        """Cancel every pending write without calling its handler."""
        tasks = [
            pending.pending_task
            for pending in self.pending_writes.values()
            if pending.pending_task and not pending.pending_task.done()
        ]
        self.pending_writes.clear()

        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def get_pending_count(self) -> int:
        """Get count of writes still settling."""
        return len(self.pending_writes)

    def is_pending(self, path: Path) -> bool:
        """Check if a write to ``path`` is still settling."""
        return path in self.pending_writes
