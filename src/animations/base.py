"""
Base Animation Class

Animations are pure functions of elapsed time: render() returns the full
frame for a moment, so the frame loop can call it at any rate without the
animation keeping per-tick state.
"""

from typing import List

from models.color import Color


class BaseAnimation:
    """
    Base class for realtime animations

    Subclasses MUST implement render(elapsed_s, size) returning exactly
    `size` colors.
    """

    def render(self, elapsed_s: float, size: int) -> List[Color]:
        raise NotImplementedError

    def duration_s(self) -> float:
        """Length of one seamless loop, used when baking a movie"""
        raise NotImplementedError
