"""
Engine - per-tick scheduling

- tween_manager: time-based value transitions
- frame_driver: fixed-rate tick loop
- frame_composer: realtime frame assembly
"""

from .tween_manager import TweenManager, Tweener
from .frame_driver import FrameDriver
from .frame_composer import FrameComposer

__all__ = ["TweenManager", "Tweener", "FrameDriver", "FrameComposer"]
