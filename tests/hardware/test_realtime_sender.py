import asyncio
import socket
from unittest.mock import patch

import pytest
import pytest_asyncio

from hardware.twinkly.errors import DeviceNotReadyError
from hardware.twinkly.realtime import RealtimeSender


class _Receiver(asyncio.DatagramProtocol):
    def __init__(self):
        self.queue: asyncio.Queue = asyncio.Queue()

    def datagram_received(self, data, addr):
        self.queue.put_nowait((data, addr))


@pytest_asyncio.fixture
async def receiver():
    loop = asyncio.get_running_loop()
    transport, protocol = await loop.create_datagram_endpoint(_Receiver, local_addr=("127.0.0.1", 0))
    protocol.port = transport.get_extra_info("sockname")[1]
    yield protocol
    transport.close()


async def _received(receiver, count):
    return [await asyncio.wait_for(receiver.queue.get(), timeout=2.0) for _ in range(count)]


@pytest.mark.asyncio
async def test_fragments_arrive_in_order(receiver):
    sender = RealtimeSender("127.0.0.1", receiver.port)
    await sender.open()
    try:
        assert sender.enqueue_packets([b"\x03frag-0", b"\x03frag-1", b"\x03frag-2"])
        await sender.drain()
        got = await _received(receiver, 3)
    finally:
        await sender.close()

    assert [data for data, _ in got] == [b"\x03frag-0", b"\x03frag-1", b"\x03frag-2"]
    assert sender.packets_sent == 3
    assert sender.frames_enqueued == 1


@pytest.mark.asyncio
async def test_datagrams_come_from_the_bound_port(receiver):
    sender = RealtimeSender("127.0.0.1", receiver.port)
    await sender.open()
    port = sender.local_port
    try:
        sender.enqueue_packets([b"x"])
        (_, addr), = await _received(receiver, 1)
    finally:
        await sender.close()
    assert addr[1] == port


@pytest.mark.asyncio
async def test_full_queue_drops_whole_frame(receiver):
    sender = RealtimeSender("127.0.0.1", receiver.port, queue_size=2)
    await sender.open()
    try:
        assert sender.enqueue_packets([b"a", b"b", b"c"]) is False
        await sender.drain()
    finally:
        await sender.close()

    assert sender.frames_dropped == 1
    assert sender.packets_sent == 0
    assert receiver.queue.empty()


@pytest.mark.asyncio
async def test_enqueue_before_open_raises():
    sender = RealtimeSender("127.0.0.1", 7777)
    with pytest.raises(DeviceNotReadyError):
        sender.enqueue_packets([b"x"])


@pytest.mark.asyncio
async def test_reopen_replaces_socket(receiver):
    sender = RealtimeSender("127.0.0.1", receiver.port)
    await sender.open()
    first_port = sender.local_port
    await sender.open()
    try:
        assert sender.is_open
        assert sender.local_port != first_port
        sender.enqueue_packets([b"after-reopen"])
        (data, _), = await _received(receiver, 1)
        assert data == b"after-reopen"
    finally:
        await sender.close()


@pytest.mark.asyncio
async def test_close_is_idempotent():
    sender = RealtimeSender("127.0.0.1", 7777)
    await sender.open()
    await sender.close()
    await sender.close()
    assert not sender.is_open
    assert sender.local_port is None


@pytest.mark.asyncio
async def test_failed_open_closes_socket():
    created = []
    real_socket = socket.socket

    def make_socket(*args):
        sock = real_socket(*args)
        created.append(sock)
        return sock

    loop = asyncio.get_running_loop()
    sender = RealtimeSender("127.0.0.1", 7777)
    with patch("hardware.twinkly.realtime.socket.socket", side_effect=make_socket), \
            patch.object(loop, "create_datagram_endpoint", side_effect=OSError("no route")):
        with pytest.raises(OSError):
            await sender.open()

    assert len(created) == 1
    assert created[0].fileno() == -1
    assert not sender.is_open
