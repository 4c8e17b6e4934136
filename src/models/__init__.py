"""
Models package - Data models for the Twinkly realtime controller
"""

from .enums import DeviceMode, MovieFormat, RunMode, LogLevel, LogCategory
from .color import Color, lerp, lerp_color, lerp_frame, blank_frame
from .device import DeviceInfo
from .easing import Easing

__all__ = [
    'DeviceMode',
    'MovieFormat',
    'RunMode',
    'LogLevel',
    'LogCategory',
    'Color',
    'lerp',
    'lerp_color',
    'lerp_frame',
    'blank_frame',
    'DeviceInfo',
    'Easing',
]
