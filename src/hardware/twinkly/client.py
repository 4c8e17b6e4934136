"""
Twinkly device client

Composes the session manager (HTTP control API) and the realtime sender
(UDP frames) for one device. Every device-communication failure is logged
and absorbed here; only configuration errors reach the caller.
"""

from __future__ import annotations

import asyncio
import math
import uuid
from typing import Any, List, Optional, Sequence

from hardware.twinkly.realtime import REALTIME_PORT, RealtimeSender, encode_frame, pack_frame
from hardware.twinkly.session import API_PREFIX, Session, SessionManager
from hardware.twinkly.transport import DeviceTransport, IDeviceTransport
from models.color import Color, clamp
from models.device import DeviceInfo
from models.enums import DeviceMode, MovieFormat
from utils.enum_helper import EnumHelper
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.DEVICE)

MODE_PATH = f"{API_PREFIX}/led/mode"
BRIGHTNESS_PATH = f"{API_PREFIX}/led/out/brightness"
MOVIES_PATH = f"{API_PREFIX}/movies"
MOVIES_NEW_PATH = f"{API_PREFIX}/movies/new"
MOVIES_FULL_PATH = f"{API_PREFIX}/movies/full"
MOVIES_CURRENT_PATH = f"{API_PREFIX}/movies/current"

KEEP_ALIVE_INTERVAL_S = 60.0


class TwinklyClient:
    """
    Client for one Twinkly device

    Example (realtime):
        client = TwinklyClient("192.168.1.113")
        await client.init_realtime()
        client.send_frame([Color(255, 0, 0)] * client.info.number_of_leds)

    Example (movie):
        await client.init_movies(delete_all=True)
        movie_id = await client.add_movie("Maki", frames, fps=25)
        await client.set_movie(movie_id)
    """

    def __init__(
        self,
        ip: str,
        transport: Optional[IDeviceTransport] = None,
        sender: Optional[RealtimeSender] = None,
        realtime_port: int = REALTIME_PORT,
        request_timeout_s: float = 5.0,
        max_auth_retries: int = 1,
    ):
        self.ip = ip
        self.transport = transport or DeviceTransport(ip, timeout_s=request_timeout_s)
        self.session_manager = SessionManager(self.transport, max_auth_retries=max_auth_retries)
        self.sender = sender or RealtimeSender(ip, realtime_port)

        self.initialized = False

        self._last_brightness = -1
        self._brightness_in_flight = False
        self.brightness_skipped = 0

    # === Properties ===

    @property
    def session(self) -> Session:
        return self.session_manager.session

    @property
    def info(self) -> Optional[DeviceInfo]:
        return self.session.info

    # === Initialization ===

    async def init(self, force: bool = False) -> bool:
        """
        Login/verify and fetch device info.

        Returns:
            True when device info is available
        """
        if self.initialized and not force:
            return True

        await self.session_manager.login_and_verify()
        info = await self.session_manager.get_device_info()
        self.initialized = info is not None
        return self.initialized

    async def init_realtime(self) -> bool:
        """init(), switch the device to realtime mode and open a fresh UDP channel."""
        ok = await self.init()
        await self.set_mode(DeviceMode.RT)
        await self.sender.open()
        return ok

    async def reinitialize(self) -> bool:
        """Full realtime init sequence regardless of current state (keep-alive)."""
        ok = await self.init(force=True)
        await self.set_mode(DeviceMode.RT)
        await self.sender.open()
        return ok

    async def keep_alive_loop(self, interval_s: float = KEEP_ALIVE_INTERVAL_S) -> None:
        """
        Re-run the init sequence every `interval_s` to outlive server-side
        token and realtime-mode expiry. Runs until cancelled.
        """
        log.info("Keep-alive started", interval_s=interval_s)
        while True:
            await asyncio.sleep(interval_s)
            try:
                ok = await self.reinitialize()
                log.debug("Keep-alive refresh", ok=ok)
            except Exception as e:
                log.error(f"Keep-alive refresh failed: {e}", exc_info=True)

    # === Mode ===

    async def set_mode(self, mode: DeviceMode) -> Optional[Any]:
        data = await self.session_manager.authorized_request(MODE_PATH, "POST", {"mode": mode.value})
        if data is not None:
            self._track_mode(mode)
            log.debug(f"Mode set to {mode.value}")
        return data

    async def get_mode(self) -> Optional[DeviceMode]:
        data = await self.session_manager.authorized_request(MODE_PATH, "GET")
        if not data:
            return None
        mode = EnumHelper.from_value(DeviceMode, data.get("mode"))
        if mode is None:
            log.warn("Unknown device mode", mode=data.get("mode"))
        else:
            self._track_mode(mode)
        return mode

    def _track_mode(self, mode: DeviceMode) -> None:
        # an "off" device counts as brightness 0 so the next positive value turns it back on
        if mode == DeviceMode.OFF:
            self._last_brightness = 0
        elif self._last_brightness == 0:
            self._last_brightness = -1

    # === Brightness ===

    async def set_brightness(self, value: float) -> Optional[Any]:
        """
        Set output brightness from a 0..1 value.

        0 switches the device off; leaving 0 switches it back to movie mode.
        A call made while another one is still in flight is skipped.
        """
        if self._brightness_in_flight:
            self.brightness_skipped += 1
            return None

        self._brightness_in_flight = True
        try:
            return await self._apply_brightness(value)
        finally:
            self._brightness_in_flight = False

    async def _apply_brightness(self, value: float) -> Optional[Any]:
        percent = int(math.floor(clamp(value, 0, 1) * 100))

        if percent == self._last_brightness:
            return {}

        if percent == 0:
            data = await self.set_mode(DeviceMode.OFF)
            self._last_brightness = 0
            return data

        if self._last_brightness == 0:
            await self.set_mode(DeviceMode.MOVIE)

        data = await self.session_manager.authorized_request(
            BRIGHTNESS_PATH,
            "POST",
            {"mode": "enabled", "type": "A", "value": percent},
        )
        self._last_brightness = percent
        return data

    # === Realtime frames ===

    def send_frame(self, frame: Sequence[Color]) -> bool:
        """
        Encode and queue one frame for UDP delivery. Does not wait for the network.

        Returns:
            False if the frame was dropped (send queue full)

        Raises:
            ConfigurationError: unsupported bytes_per_led / too many fragments
            DeviceNotReadyError: device info or UDP channel missing
        """
        info = self.session_manager.require_info()
        packets = encode_frame(frame, self.session.token_bytes, info.bytes_per_led, info.number_of_leds)
        return self.sender.enqueue_packets(packets)

    # === Movies ===

    async def init_movies(self, delete_all: bool = False) -> bool:
        ok = await self.init()
        if delete_all:
            await self.set_mode(DeviceMode.OFF)
            await self.delete_all_movies()
        return ok

    async def delete_all_movies(self) -> Optional[Any]:
        return await self.session_manager.authorized_request(MOVIES_PATH, "DELETE")

    async def add_movie(
        self,
        name: str,
        frames: List[List[Color]],
        fps: float,
        fmt: Optional[MovieFormat] = None,
    ) -> Optional[int]:
        """
        Create a movie entry and upload its frames.

        Returns:
            Movie id assigned by the device, or None on failure

        Raises:
            DeviceNotReadyError: device info not loaded
        """
        info = self.session_manager.require_info()
        if fmt is None:
            fmt = MovieFormat.RGBW_RAW if info.bytes_per_led == 4 else MovieFormat.RGB_RAW

        created = await self.session_manager.authorized_request(
            MOVIES_NEW_PATH,
            "POST",
            {
                "name": name,
                "unique_id": str(uuid.uuid4()),
                "descriptor_type": fmt.value,
                "leds_per_frame": info.number_of_leds,
                "frames_number": len(frames),
                "fps": fps,
            },
        )
        if created is None:
            return None

        movie = b"".join(pack_frame(frame, info.bytes_per_led, info.number_of_leds) for frame in frames)
        log.info(f"Uploading {len(movie) / 1_000_000} MB movie", name=name, frames=len(frames))

        uploaded = await self.session_manager.authorized_request(
            MOVIES_FULL_PATH,
            "POST",
            content=movie,
            headers={"Content-Type": "application/octet-stream"},
        )
        if uploaded is None:
            return None

        return created.get("id")

    async def set_movie(self, movie_id: int, now: bool = True) -> Optional[Any]:
        data = await self.session_manager.authorized_request(MOVIES_CURRENT_PATH, "POST", {"id": movie_id})
        if now:
            await self.set_mode(DeviceMode.MOVIE)
        return data

    # === Lifecycle ===

    async def close(self) -> None:
        await self.sender.close()
        await self.transport.aclose()
        log.info("Device client closed", ip=self.ip)
