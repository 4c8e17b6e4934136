"""
Realtime Frame Protocol (UDP, protocol version 3)

Frame → packed pixel bytes → ≤900 byte fragments → one datagram per fragment:

    byte 0        0x03 (protocol version)
    bytes 1..N    raw authentication token bytes
    byte N+1      0x00
    byte N+2      0x00
    byte N+3      fragment index (0-based)
    bytes N+4..   packed pixel bytes for this fragment

https://xled-docs.readthedocs.io/en/latest/protocol_details.html#version-3

Datagrams leave through a FIFO queue drained by a single writer task, so the
fragments of one frame always go out in index order. Sending never blocks the
caller and there is no acknowledgment channel.
"""

from __future__ import annotations

import asyncio
import socket
from typing import List, Optional, Sequence

from hardware.twinkly.errors import ConfigurationError, DeviceNotReadyError
from models.color import Color
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.REALTIME)

PROTOCOL_VERSION = 0x03
REALTIME_PORT = 7777
MAX_FRAGMENT_PAYLOAD = 900
MAX_FRAGMENTS = 256


def _channel(value: Optional[float]) -> int:
    """Truncate to int and clamp into a byte"""
    if value is None:
        return 0
    v = int(value)
    if v < 0:
        return 0
    if v > 255:
        return 255
    return v


def pack_frame(frame: Sequence[Color], bytes_per_led: int, number_of_leds: Optional[int] = None) -> bytes:
    """
    Pack pixels into the device byte layout.

    3 bytes per LED: [r, g, b]
    4 bytes per LED: [w, r, g, b]  (w = 0 when the color has no white channel)

    Args:
        frame: Pixel colors
        bytes_per_led: Channel count reported by the device
        number_of_leds: Output size in pixels (defaults to len(frame)). Missing
            pixels are left black, surplus pixels are ignored.

    Raises:
        ConfigurationError: bytes_per_led is not 3 or 4
    """
    if bytes_per_led not in (3, 4):
        raise ConfigurationError(f"Don't know how to handle {bytes_per_led} bytes per led")

    count = len(frame) if number_of_leds is None else number_of_leds
    buffer = bytearray(count * bytes_per_led)

    for i in range(min(count, len(frame))):
        color = frame[i]
        offset = i * bytes_per_led
        if bytes_per_led == 3:
            buffer[offset] = _channel(color.r)
            buffer[offset + 1] = _channel(color.g)
            buffer[offset + 2] = _channel(color.b)
        else:
            buffer[offset] = _channel(color.w)
            buffer[offset + 1] = _channel(color.r)
            buffer[offset + 2] = _channel(color.g)
            buffer[offset + 3] = _channel(color.b)

    return bytes(buffer)


def split_fragments(payload: bytes, size: int = MAX_FRAGMENT_PAYLOAD) -> List[bytes]:
    """
    Split packed pixels into consecutive chunks of at most `size` bytes.

    Raises:
        ConfigurationError: more than 256 fragments would be needed
    """
    chunks = [payload[i:i + size] for i in range(0, len(payload), size)]
    if len(chunks) > MAX_FRAGMENTS:
        raise ConfigurationError(
            f"Frame needs {len(chunks)} fragments, protocol allows {MAX_FRAGMENTS}"
        )
    return chunks


def build_packet(token_bytes: bytes, index: int, chunk: bytes) -> bytes:
    """
    Build one fragment datagram.

    Raises:
        ConfigurationError: chunk over 900 bytes or index outside 0..255
    """
    if len(chunk) > MAX_FRAGMENT_PAYLOAD:
        raise ConfigurationError(
            f"Can't send frame fragment bigger than {MAX_FRAGMENT_PAYLOAD} in length"
        )
    if not 0 <= index < MAX_FRAGMENTS:
        raise ConfigurationError(f"Fragment index {index} does not fit in one byte")

    header = bytes([PROTOCOL_VERSION]) + token_bytes + bytes([0x00, 0x00, index])
    return header + chunk


def encode_frame(
    frame: Sequence[Color],
    token_bytes: bytes,
    bytes_per_led: int,
    number_of_leds: Optional[int] = None,
) -> List[bytes]:
    """Frame → ordered list of datagrams (fragment 0 first)."""
    payload = pack_frame(frame, bytes_per_led, number_of_leds)
    return [
        build_packet(token_bytes, index, chunk)
        for index, chunk in enumerate(split_fragments(payload))
    ]


class _DatagramSender(asyncio.DatagramProtocol):
    def __init__(self):
        self.transport: Optional[asyncio.DatagramTransport] = None
        self.errors = 0

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        self.transport = transport  # type: ignore[assignment]

    def error_received(self, exc: Exception) -> None:
        self.errors += 1
        log.warn("UDP error received", error=repr(exc))

    def connection_lost(self, exc: Optional[Exception]) -> None:
        if exc:
            log.warn("UDP connection lost", error=repr(exc))


class RealtimeSender:
    """
    One UDP socket per device session with an ordered, single-writer send queue.

    Example:
        sender = RealtimeSender("192.168.1.113")
        await sender.open()
        sender.enqueue_packets(encode_frame(frame, token_bytes, 3))
        ...
        await sender.close()
    """

    def __init__(self, host: str, port: int = REALTIME_PORT, queue_size: int = 1024):
        """
        Args:
            host: Device IP
            port: Realtime UDP port on the device
            queue_size: Maximum datagrams waiting for the writer
        """
        self.host = host
        self.port = port
        self.queue_size = queue_size

        self._protocol: Optional[_DatagramSender] = None
        self._transport: Optional[asyncio.DatagramTransport] = None
        self._queue: Optional[asyncio.Queue] = None
        self._writer_task: Optional[asyncio.Task] = None

        self.local_port: Optional[int] = None
        self.packets_sent = 0
        self.frames_enqueued = 0
        self.frames_dropped = 0
        self.send_errors = 0

    @property
    def is_open(self) -> bool:
        return self._transport is not None and not self._transport.is_closing()

    async def open(self) -> None:
        """Bind a fresh socket to an ephemeral port. A previously open socket is replaced."""
        loop = asyncio.get_running_loop()
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        protocol = _DatagramSender()
        try:
            sock.bind(("0.0.0.0", 0))
            sock.setblocking(False)
            transport, _ = await loop.create_datagram_endpoint(lambda: protocol, sock=sock)
        except BaseException:
            sock.close()
            raise

        if self._transport is not None:
            await self.close()

        self._protocol = protocol
        self._transport = transport
        self.local_port = sock.getsockname()[1]
        self._queue = asyncio.Queue(maxsize=self.queue_size)
        self._writer_task = asyncio.create_task(self._writer(), name="RealtimeUDPWriter")

        log.info("Realtime UDP channel open", local_port=self.local_port, target=f"{self.host}:{self.port}")

    def enqueue_packets(self, packets: Sequence[bytes]) -> bool:
        """
        Queue all fragments of one frame, or none of them.

        Returns:
            False if the frame was dropped because the queue is full

        Raises:
            DeviceNotReadyError: open() has not been called
        """
        if self._queue is None or not self.is_open:
            raise DeviceNotReadyError("UDP client not initialized, ignoring frame")

        free = self._queue.maxsize - self._queue.qsize()
        if len(packets) > free:
            self.frames_dropped += 1
            log.warn("Send queue full, dropping frame", fragments=len(packets), free=free)
            return False

        for packet in packets:
            self._queue.put_nowait(packet)
        self.frames_enqueued += 1
        return True

    async def drain(self) -> None:
        """Wait until every queued datagram has been handed to the socket."""
        if self._queue is not None:
            await self._queue.join()

    async def _writer(self) -> None:
        queue = self._queue
        address = (self.host, self.port)
        while True:
            packet = await queue.get()
            try:
                self._transport.sendto(packet, address)
                self.packets_sent += 1
            except Exception as e:
                self.send_errors += 1
                log.warn("UDP send failed", error=repr(e))
            finally:
                queue.task_done()

    async def close(self) -> None:
        """Stop the writer and release the socket."""
        if self._writer_task is not None:
            self._writer_task.cancel()
            try:
                await self._writer_task
            except asyncio.CancelledError:
                pass
            self._writer_task = None

        if self._transport is not None:
            self._transport.close()
            log.debug("Realtime UDP channel closed", local_port=self.local_port)

        self._transport = None
        self._protocol = None
        self._queue = None
        self.local_port = None
