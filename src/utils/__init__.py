"""
Utility functions for the Twinkly realtime controller
"""

from .colors import (
    rgb_to_hsl,
    hsl_to_rgb,
    gamma_correct,
    increase_luminosity,
)

__all__ = [
    'rgb_to_hsl',
    'hsl_to_rgb',
    'gamma_correct',
    'increase_luminosity',
]
