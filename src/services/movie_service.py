"""
Movie Service

Movie mode: the animation is baked into frames once, uploaded to the device
as a movie, and played back by the device itself. The host only controls
brightness, which follows the activity opacity.
"""

from __future__ import annotations

import asyncio
import math
from typing import List, Optional

from animations.base import BaseAnimation
from hardware.twinkly.client import TwinklyClient
from lifecycle.task_registry import create_tracked_task, TaskCategory
from models.color import Color
from models.enums import DeviceMode
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.DEVICE)


def bake_frames(animation: BaseAnimation, fps: float, number_of_leds: int) -> List[List[Color]]:
    """Render one seamless loop of `animation` at `fps`."""
    count = int(math.ceil(animation.duration_s() * fps))
    return [animation.render(i / fps, number_of_leds) for i in range(count)]


class MovieService:
    """
    Example:
        movies = MovieService(client, GnomeStripesAnimation(3), name="Maki")
        await movies.prepare(upload=True)
        active = await movies.is_playing()
    """

    def __init__(self, client: TwinklyClient, animation: BaseAnimation, name: str = "Maki"):
        self.client = client
        self.animation = animation
        self.name = name

        self._latest_brightness: Optional[float] = None
        self._brightness_task: Optional[asyncio.Task] = None

    async def prepare(self, upload: bool = False) -> bool:
        """
        Log in and select the movie. With `upload`, existing movies are
        deleted and the animation is baked and uploaded first.
        """
        ok = await self.client.init_movies(delete_all=upload)
        if not ok:
            return False

        movie_id = 0
        if upload:
            uploaded_id = await self.upload()
            if uploaded_id is None:
                log.error("Movie upload failed", name=self.name)
                return False
            movie_id = uploaded_id

        await self.client.set_movie(movie_id, now=False)
        return True

    async def upload(self) -> Optional[int]:
        info = self.client.session_manager.require_info()
        frames = bake_frames(self.animation, info.frame_rate, info.number_of_leds)
        log.info("Baked movie", name=self.name, frames=len(frames), fps=info.frame_rate)

        movie_id = await self.client.add_movie(self.name, frames, info.frame_rate)
        if movie_id is not None:
            log.info("Finished uploading movies", movie_id=movie_id)
        return movie_id

    async def is_playing(self) -> bool:
        return (await self.client.get_mode()) == DeviceMode.MOVIE

    # === Brightness follow ===

    def on_opacity(self, value: float) -> None:
        """
        Tween callback: push `value` as device brightness without blocking
        the tick. While a push is in flight only the newest value is kept and
        sent once the current push finishes.
        """
        self._latest_brightness = value
        if self._brightness_task is None or self._brightness_task.done():
            self._brightness_task = create_tracked_task(
                self._push_brightness(),
                category=TaskCategory.BACKGROUND,
                description="Push brightness",
            )

    async def _push_brightness(self) -> None:
        while True:
            value = self._latest_brightness
            await self.client.set_brightness(value)
            if self._latest_brightness == value:
                return
