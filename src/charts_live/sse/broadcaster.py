"""Reload broadcasting to connected server-sent event clients."""

import asyncio
import logging
from typing import List, Protocol

from ..errors import ClientWriteError
from .messages import CONNECTED_FRAME, RELOAD_FRAME


logger = logging.getLogger(__name__)


class EventStream(Protocol):
    """The part of ``aiohttp.web.StreamResponse`` the broadcaster uses."""

    async def write(self, data: bytes) -> None: ...

    async def write_eof(self, data: bytes = b"") -> None: ...


class ClientConnection:
    """
    One open SSE stream.

    Has no identity beyond the object itself; the broadcaster removes it
    by reference.
    """

    def __init__(self, stream: EventStream):
        self.stream = stream
        self._closed = asyncio.Event()

    @property
    def is_closed(self) -> bool:
        return self._closed.is_set()

    async def send(self, frame: bytes) -> None:
        """Write one frame to the client."""
        await self.stream.write(frame)

    async def wait_closed(self) -> None:
        """Wait until the server ends this stream."""
        await self._closed.wait()

    async def close(self) -> None:
        """End the stream. Safe to call more than once."""
        if self.is_closed:
            return
        self._closed.set()
        try:
            await self.stream.write_eof()
        except (OSError, RuntimeError) as e:
            logger.debug(f"Ignoring error while closing client stream: {e}")


class ReloadBroadcaster:
    """
    Fans reload signals out to every connected SSE client.

    Clients are kept in connection order. A client that fails during a
    broadcast never stops delivery to the others; it is dropped once the
    broadcast is done.
    """

    def __init__(self):
        """Initialize the broadcaster."""
        self.clients: List[ClientConnection] = []

    async def subscribe(self, stream: EventStream) -> ClientConnection:
        """
        Register a new client.

        Sends the ``connected`` handshake before adding the client, so a
        client never sees a reload ahead of its handshake.

        Args:
            stream: Prepared streaming response

        Returns:
            The connection, to be passed to ``unsubscribe`` on disconnect
        """
        connection = ClientConnection(stream)
        await connection.send(CONNECTED_FRAME)
        self.clients.append(connection)
        logger.info(f"Client connected ({len(self.clients)} total)")
        return connection

    def unsubscribe(self, connection: ClientConnection) -> None:
        """
        Remove a client. No-op if it is already gone.

        Args:
            connection: Connection returned by ``subscribe``
        """
        if connection in self.clients:
            self.clients.remove(connection)
            logger.info(f"Client disconnected ({len(self.clients)} remaining)")

    async def broadcast(self) -> int:
        """
        Send a reload frame to every connected client.

        Returns:
            Number of clients the frame was delivered to
        """
        if not self.clients:
            logger.info("No clients connected to broadcast reload")
            return 0

        # Iterate a snapshot; subscribe/unsubscribe may run while we await writes
        snapshot = list(self.clients)
        logger.info(f"Broadcasting reload to {len(snapshot)} client(s)")

        failed: List[ClientConnection] = []
        for index, connection in enumerate(snapshot):
            try:
                await connection.send(RELOAD_FRAME)
            except (OSError, RuntimeError) as e:
                logger.warning(str(ClientWriteError(index, e)))
                failed.append(connection)

        for connection in failed:
            self.unsubscribe(connection)
            await connection.close()

        return len(snapshot) - len(failed)

    def get_client_count(self) -> int:
        """
        Get the number of connected clients.

        Returns:
            Number of connected clients
        """
        return len(self.clients)

    async def close_all(self) -> None:
        """End every client stream and clear the set."""
        connections = list(self.clients)
        self.clients.clear()

        for connection in connections:
            await connection.close()

        if connections:
            logger.info(f"Closed {len(connections)} client connection(s)")
