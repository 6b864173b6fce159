"""HTTP server that serves a chart workspace with live reload."""

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from aiohttp import web

from ..errors import PortBindError, WatchInitError
from ..sse import KEEPALIVE_FRAME, ReloadBroadcaster
from .constants import ServerConstants, SessionPhase, WatchConstants
from .state import ServerState
from .watcher import ChangeWatcher


logger = logging.getLogger(__name__)


class LiveReloadServer:
    """
    Serves one workspace directory over HTTP with live reload.

    Owns the HTTP listener, the reload broadcaster and the file watcher
    of the current session. Starting a new workspace tears the previous
    session down completely first, so at most one listener and one
    watcher exist at any time.

    Routes:
        GET /events  SSE stream of live-reload signals
        GET /health  {"status": "ok", "clients": n, "workspace": path|null}
        GET /*       static files from the workspace
    """

    def __init__(
        self,
        host: str = ServerConstants.DEFAULT_HOST,
        port: int = ServerConstants.DEFAULT_PORT,
        stability_threshold: float = WatchConstants.STABILITY_THRESHOLD_SECONDS,
        poll_interval: float = WatchConstants.POLL_INTERVAL_SECONDS,
        keepalive_interval: float = ServerConstants.KEEPALIVE_INTERVAL_SECONDS,
    ):
        """
        Initialize the server.

        Args:
            host: Host address to bind to
            port: Port to listen on (0 picks a free port)
            stability_threshold: Watcher quiet period before a change is reported
            poll_interval: Watcher write stability check interval
            keepalive_interval: Seconds between keepalive frames on idle streams
        """
        self.state = ServerState(host=host, port=port)
        self.broadcaster = ReloadBroadcaster()
        self.watcher: Optional[ChangeWatcher] = None
        self.runner: Optional[web.AppRunner] = None
        self.stability_threshold = stability_threshold
        self.poll_interval = poll_interval
        self.keepalive_interval = keepalive_interval
        self._lifecycle_lock = asyncio.Lock()

    def _create_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/events", self._handle_events)
        app.router.add_get("/health", self._handle_health)
        app.router.add_get("/{path:.*}", self._handle_static)
        return app

    # ── Lifecycle ──

    async def start(self, directory: Path) -> None:
        """
        Serve ``directory``, replacing any session that is already running.

        Calls are serialized; a start issued while another start or stop is
        in flight waits for it to finish.

        Args:
            directory: Workspace directory to serve

        Raises:
            PortBindError: If the listener cannot bind. No session is left behind.
        """
        async with self._lifecycle_lock:
            await self._stop_session()
            await self._start_session(Path(directory).resolve())

    async def _start_session(self, workspace: Path) -> None:
        self.state.phase = SessionPhase.STARTING
        self.state.workspace = workspace

        runner = web.AppRunner(
            self._create_app(),
            handler_cancellation=True,
            shutdown_timeout=ServerConstants.SHUTDOWN_TIMEOUT_SECONDS,
        )
        await runner.setup()
        site = web.TCPSite(runner, self.state.host, self.state.port)
        try:
            await site.start()
        except OSError as e:
            await runner.cleanup()
            self.state.reset()
            logger.error(f"Server error: cannot bind {self.state.host}:{self.state.port}: {e}")
            raise PortBindError(self.state.host, self.state.port, e) from e

        self.runner = runner
        self.state.bound_port = self._resolve_port(runner)
        self.state.phase = SessionPhase.LISTENING
        logger.info(f"Server started on {self.url}")
        logger.info(f"Serving workspace: {workspace}")

        self._start_watcher(workspace)

    def _start_watcher(self, workspace: Path) -> None:
        watcher = ChangeWatcher(
            self._on_file_changed,
            stability_threshold=self.stability_threshold,
            poll_interval=self.poll_interval,
        )
        try:
            watcher.watch(workspace)
            watcher.start()
        except WatchInitError as e:
            logger.warning(f"{e}; serving without live reload")
            return

        self.watcher = watcher
        self.state.live_reload = True

    def _resolve_port(self, runner: web.AppRunner) -> int:
        for address in runner.addresses:
            if isinstance(address, tuple) and len(address) >= 2:
                return address[1]
        return self.state.port

    async def stop(self) -> None:
        """
        Stop the current session. No-op when nothing is running.

        Tears down the watcher, then the client streams, then the listener.
        """
        async with self._lifecycle_lock:
            await self._stop_session()

    async def _stop_session(self) -> None:
        if self.state.phase == SessionPhase.STOPPED and self.runner is None:
            return

        self.state.phase = SessionPhase.STOPPING

        if self.watcher:
            await self.watcher.close()
            self.watcher = None

        await self.broadcaster.close_all()

        if self.runner:
            await self.runner.cleanup()
            self.runner = None
            logger.info("Server stopped")

        self.state.reset()

    # ── Reload ──

    async def _on_file_changed(self, file_name: str) -> None:
        await self.broadcast_reload()

    async def broadcast_reload(self) -> int:
        """
        Tell every connected browser to reload.

        Returns:
            Number of clients the signal was delivered to
        """
        return await self.broadcaster.broadcast()

    # ── Status ──

    def status(self) -> Dict[str, Any]:
        """
        Get the health summary served at /health.

        Returns:
            Dictionary with status, client count and workspace path
        """
        return {
            "status": "ok",
            "clients": self.broadcaster.get_client_count(),
            "workspace": str(self.state.workspace) if self.state.workspace else None,
        }

    def describe(self) -> Dict[str, Any]:
        """Get the health summary plus listener details."""
        return {
            **self.status(),
            "phase": self.state.phase.value,
            "url": self.url if self.is_running() else None,
            "port": self.get_port(),
            "live_reload": self.state.live_reload,
        }

    def get_port(self) -> int:
        """Get the bound port, or the configured one when not listening."""
        return self.state.bound_port or self.state.port

    @property
    def url(self) -> str:
        return f"http://{self.state.host}:{self.get_port()}"

    def is_running(self) -> bool:
        """
        Check if the server is listening.

        Returns:
            True if listening, False otherwise
        """
        return self.state.listening

    # ── HTTP handlers ──

    async def _handle_events(self, request: web.Request) -> web.StreamResponse:
        if not self.state.listening:
            raise web.HTTPServiceUnavailable(text="Server is not accepting live-reload clients")

        response = web.StreamResponse(status=200, headers=ServerConstants.SSE_HEADERS)
        await response.prepare(request)

        connection = await self.broadcaster.subscribe(response)
        try:
            while not connection.is_closed:
                try:
                    await asyncio.wait_for(
                        connection.wait_closed(), timeout=self.keepalive_interval
                    )
                except asyncio.TimeoutError:
                    await connection.send(KEEPALIVE_FRAME)
        except ConnectionError as e:
            logger.debug(f"SSE client went away: {e}")
        finally:
            # Disconnect hook; also runs when aiohttp cancels the handler
            self.broadcaster.unsubscribe(connection)

        return response

    async def _handle_health(self, request: web.Request) -> web.Response:
        return web.json_response(self.status())

    async def _handle_static(self, request: web.Request) -> web.StreamResponse:
        root = self.state.workspace
        if root is None:
            raise web.HTTPNotFound()

        target = (root / request.match_info["path"]).resolve()
        if target != root and root not in target.parents:
            raise web.HTTPNotFound()

        if target.is_dir():
            target = target / ServerConstants.INDEX_FILE
        if not target.is_file():
            raise web.HTTPNotFound()

        return web.FileResponse(target, headers={"Cache-Control": "no-cache"})
