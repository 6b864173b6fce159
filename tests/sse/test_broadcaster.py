import pytest

from charts_live.sse.broadcaster import ClientConnection, ReloadBroadcaster
from charts_live.sse.messages import CONNECTED_FRAME, RELOAD_FRAME


class FakeStream:
    """Stands in for an aiohttp StreamResponse."""

    def __init__(self, fail_on_write=False):
        self.fail_on_write = fail_on_write
        self.frames = []
        self.eof = False

    async def write(self, data):
        if self.fail_on_write:
            raise ConnectionResetError("Cannot write to closing transport")
        self.frames.append(data)

    async def write_eof(self, data=b""):
        self.eof = True


async def subscribe_all(broadcaster, streams):
    connections = []
    for stream in streams:
        connections.append(await broadcaster.subscribe(stream))
    return connections


@pytest.mark.asyncio
async def test_subscribe_sends_connected_handshake():
    """
    Test that a new client receives the connected frame and is counted.
    """
    broadcaster = ReloadBroadcaster()
    stream = FakeStream()

    connection = await broadcaster.subscribe(stream)

    assert stream.frames == [b"data: connected\n\n"]
    assert broadcaster.get_client_count() == 1
    assert isinstance(connection, ClientConnection)


@pytest.mark.asyncio
async def test_subscribe_keeps_connection_order():
    """
    Test that clients are held in the order they connected.
    """
    broadcaster = ReloadBroadcaster()
    connections = await subscribe_all(broadcaster, [FakeStream() for _ in range(3)])

    assert broadcaster.clients == connections


@pytest.mark.asyncio
async def test_broadcast_with_no_clients_is_noop():
    """
    Test that broadcasting to nobody does not raise.
    """
    broadcaster = ReloadBroadcaster()

    delivered = await broadcaster.broadcast()

    assert delivered == 0
    assert broadcaster.get_client_count() == 0


@pytest.mark.asyncio
async def test_broadcast_reaches_every_client():
    """
    Test that every client gets exactly one reload frame per broadcast.
    """
    broadcaster = ReloadBroadcaster()
    streams = [FakeStream() for _ in range(3)]
    await subscribe_all(broadcaster, streams)

    delivered = await broadcaster.broadcast()

    assert delivered == 3
    for stream in streams:
        assert stream.frames == [CONNECTED_FRAME, RELOAD_FRAME]


@pytest.mark.parametrize("failing_index", [0, 1, 3])
@pytest.mark.asyncio
async def test_failing_client_does_not_block_others(failing_index):
    """
    Test that one failed write still delivers to all other clients.

    Client 0 failing must not cause client 1 to be skipped.
    """
    broadcaster = ReloadBroadcaster()
    streams = [FakeStream() for _ in range(4)]
    connections = await subscribe_all(broadcaster, streams)
    streams[failing_index].fail_on_write = True

    delivered = await broadcaster.broadcast()

    assert delivered == 3
    for index, stream in enumerate(streams):
        if index == failing_index:
            assert RELOAD_FRAME not in stream.frames
        else:
            assert stream.frames[-1] == RELOAD_FRAME

    # Failed client was removed by reference, the rest kept their order
    expected = [c for i, c in enumerate(connections) if i != failing_index]
    assert broadcaster.clients == expected
    assert connections[failing_index].is_closed


@pytest.mark.asyncio
async def test_all_clients_failing_empties_the_set():
    """
    Test that every failed client is removed after the broadcast.
    """
    broadcaster = ReloadBroadcaster()
    streams = [FakeStream() for _ in range(2)]
    await subscribe_all(broadcaster, streams)
    for stream in streams:
        stream.fail_on_write = True

    delivered = await broadcaster.broadcast()

    assert delivered == 0
    assert broadcaster.get_client_count() == 0


@pytest.mark.asyncio
async def test_unsubscribe_removes_by_reference():
    """
    Test that unsubscribe removes exactly the given connection and tolerates repeats.
    """
    broadcaster = ReloadBroadcaster()
    first, second, third = await subscribe_all(broadcaster, [FakeStream() for _ in range(3)])

    broadcaster.unsubscribe(second)
    broadcaster.unsubscribe(second)

    assert broadcaster.clients == [first, third]


@pytest.mark.asyncio
async def test_close_all_ends_streams_and_clears():
    """
    Test that close_all() ends every stream and empties the set.
    """
    broadcaster = ReloadBroadcaster()
    streams = [FakeStream() for _ in range(2)]
    connections = await subscribe_all(broadcaster, streams)

    await broadcaster.close_all()

    assert broadcaster.get_client_count() == 0
    assert all(stream.eof for stream in streams)
    assert all(connection.is_closed for connection in connections)

    # Nothing left to deliver to
    assert await broadcaster.broadcast() == 0


@pytest.mark.asyncio
async def test_connection_close_is_idempotent():
    """
    Test that closing a connection twice only ends the stream once.
    """
    stream = FakeStream()
    connection = ClientConnection(stream)

    await connection.close()
    stream.eof = False
    await connection.close()

    assert connection.is_closed
    assert stream.eof is False
