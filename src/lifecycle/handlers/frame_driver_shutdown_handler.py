"""
FrameDriver shutdown handler.

Stops the tick loop first so no frame is queued while the UDP channel closes.
"""

from __future__ import annotations

from engine.frame_driver import FrameDriver
from lifecycle.shutdown_protocol import IShutdownHandler
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)


class FrameDriverShutdownHandler(IShutdownHandler):

    def __init__(self, frame_driver: FrameDriver):
        self.frame_driver = frame_driver

    @property
    def shutdown_priority(self) -> int:
        return 120  # stop rendering early

    async def shutdown(self) -> None:
        log.info("Stopping frame loop...")
        await self.frame_driver.stop()
