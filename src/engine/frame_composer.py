"""
FrameComposer - builds the realtime frame for one tick

animation frame at elapsed time → faded toward black by opacity → sink

Opacity 0 sends a constant all-black frame without rendering the animation.
"""

from typing import Callable, List, Sequence

from animations.base import BaseAnimation
from models.color import Color, blank_frame, clamp, lerp_frame

FrameSink = Callable[[Sequence[Color]], bool]
OpacitySource = Callable[[], float]


class FrameComposer:
    """Callable frame hook for FrameDriver"""

    def __init__(
        self,
        animation: BaseAnimation,
        sink: FrameSink,
        number_of_leds: int,
        opacity: OpacitySource,
    ):
        """
        Args:
            animation: Frame source
            sink: Queues the frame for sending (TwinklyClient.send_frame)
            number_of_leds: Frame length
            opacity: Current opacity 0..1 (ActivityService)
        """
        self.animation = animation
        self.sink = sink
        self.number_of_leds = number_of_leds
        self.opacity = opacity
        self.blank = blank_frame(number_of_leds)

    def compose(self, elapsed_s: float) -> List[Color]:
        opacity = clamp(self.opacity(), 0.0, 1.0)
        if opacity <= 0:
            return self.blank

        frame = self.animation.render(elapsed_s, self.number_of_leds)
        if opacity < 1:
            frame = lerp_frame(self.blank, frame, opacity)
        return frame

    def __call__(self, elapsed_s: float) -> bool:
        return self.sink(self.compose(elapsed_s))
