"""
FrameDriver - fixed-rate tick loop for tweens and realtime frames

Each tick:
  1. advances the TweenManager
  2. calls the frame hook (composer) with the elapsed animation time

Timing uses absolute deadlines on the event loop clock. A tick is never
re-entered; when a tick overruns, the missed slots are skipped and counted
instead of being replayed in a burst.

Errors inside a tick are logged and the loop keeps going, except
ConfigurationError, which ends the loop and fails the RENDER task.
"""

from __future__ import annotations

import asyncio
import time
from collections import deque
from typing import Callable, Deque, Dict, Optional

from engine.tween_manager import TweenManager
from hardware.twinkly.errors import ConfigurationError
from lifecycle.task_registry import create_tracked_task, TaskCategory
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.RENDER)

FrameHook = Callable[[float], bool]


class FrameDriver:
    """
    Frame-pacing loop

    Example:
        driver = FrameDriver(tween_manager, fps=info.frame_rate, on_tick=composer)
        driver.start()
        ...
        await driver.stop()
    """

    def __init__(
        self,
        tween_manager: TweenManager,
        fps: float,
        on_tick: Optional[FrameHook] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Args:
            tween_manager: Advanced once per tick
            fps: Target tick rate (device frame rate)
            on_tick: Called with elapsed seconds; returns True if a frame was queued.
                None in movie mode, where only tweens are advanced.
            clock: Monotonic seconds for the animation time base
        """
        self.tween_manager = tween_manager
        self.fps = max(1.0, float(fps))
        self.on_tick = on_tick
        self._clock = clock or time.monotonic

        self.running = False
        self.render_task: Optional[asyncio.Task] = None
        self.start_time = self._clock()

        # Timing & metrics
        self.tick_times: Deque[float] = deque(maxlen=300)
        self.ticks = 0
        self.frames_sent = 0
        self.frames_dropped = 0
        self.skipped_ticks = 0
        self.tick_errors = 0
        self._last_error: Optional[str] = None

    @property
    def interval_s(self) -> float:
        return 1.0 / self.fps

    def elapsed(self) -> float:
        return self._clock() - self.start_time

    # === Lifecycle ===

    def start(self) -> asyncio.Task:
        """Start the loop as a tracked RENDER task."""
        if self.running and self.render_task is not None:
            log.warn("FrameDriver already running")
            return self.render_task

        self.running = True
        self.start_time = self._clock()
        self.render_task = create_tracked_task(
            self._render_loop(),
            category=TaskCategory.RENDER,
            description=f"FrameDriver @ {self.fps:g} FPS",
        )
        return self.render_task

    async def stop(self) -> None:
        if not self.running:
            return
        self.running = False
        if self.render_task and not self.render_task.done():
            self.render_task.cancel()
            try:
                await self.render_task
            except asyncio.CancelledError:
                pass

        log.info(
            "FrameDriver stopped",
            ticks=self.ticks,
            frames_sent=self.frames_sent,
            skipped_ticks=self.skipped_ticks,
        )

    # === Metrics ===

    def get_actual_fps(self) -> float:
        if len(self.tick_times) < 2:
            return 0.0
        duration = self.tick_times[-1] - self.tick_times[0]
        if duration <= 0:
            return 0.0
        return (len(self.tick_times) - 1) / duration

    def get_metrics(self) -> Dict:
        return {
            "fps_target": self.fps,
            "fps_actual": round(self.get_actual_fps(), 2),
            "ticks": self.ticks,
            "frames_sent": self.frames_sent,
            "frames_dropped": self.frames_dropped,
            "skipped_ticks": self.skipped_ticks,
            "tick_errors": self.tick_errors,
            "running": self.running,
        }

    # === Core Loop ===

    async def _render_loop(self) -> None:
        loop = asyncio.get_running_loop()
        interval = self.interval_s
        next_deadline = loop.time()

        log.info(f"Render loop @ {self.fps:g} FPS (interval={interval * 1000:.2f}ms)")

        while self.running:
            delay = next_deadline - loop.time()
            await asyncio.sleep(max(0.0, delay))

            self.tick()

            next_deadline += interval
            late = loop.time() - next_deadline
            if late >= interval:
                missed = int(late // interval)
                self.skipped_ticks += missed
                next_deadline += missed * interval
                log.debug("Tick overran, skipping slots", missed=missed)

    def tick(self) -> None:
        """
        Run one tick synchronously.

        Raises:
            ConfigurationError: propagated so the render task fails
        """
        self.ticks += 1
        self.tick_times.append(time.perf_counter())
        try:
            self.tween_manager.update()
            if self.on_tick is not None:
                if self.on_tick(self.elapsed()):
                    self.frames_sent += 1
                else:
                    self.frames_dropped += 1
            self._last_error = None
        except ConfigurationError:
            log.error("Unrecoverable frame configuration error", exc_info=True)
            self.running = False
            raise
        except Exception as e:
            self.tick_errors += 1
            message = f"{type(e).__name__}: {e}"
            # first occurrence of a repeating error at full level, repeats at debug
            if message != self._last_error:
                log.error(f"Tick error: {message}", exc_info=True)
            else:
                log.debug(f"Tick error repeated: {message}")
            self._last_error = message

    def __repr__(self) -> str:
        return (
            f"FrameDriver(fps={self.get_actual_fps():.1f}/{self.fps:g}, "
            f"sent={self.frames_sent}, skipped={self.skipped_ticks})"
        )
