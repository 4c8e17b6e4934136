"""
Device connection shutdown handler.

Closes the realtime UDP socket and the HTTP client of a TwinklyClient.
The device itself is left in its current mode; it falls back from realtime
mode on its own once frames stop.
"""

from __future__ import annotations

from hardware.twinkly.client import TwinklyClient
from lifecycle.shutdown_protocol import IShutdownHandler
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)


class DeviceShutdownHandler(IShutdownHandler):

    def __init__(self, client: TwinklyClient):
        self.client = client

    @property
    def shutdown_priority(self) -> int:
        return 30  # after background tasks are cancelled

    async def shutdown(self) -> None:
        log.info("Closing device connection...", ip=self.client.ip)
        await self.client.close()
