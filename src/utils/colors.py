"""
Color conversion utilities

Pure functions for color space conversions used when preparing pattern tables.
HSL values follow the usual web convention: hue 0-360, saturation and
lightness 0-100.
"""

import colorsys
import math
from typing import Tuple


def rgb_to_hsl(r: float, g: float, b: float) -> Tuple[float, float, float]:
    """
    Convert RGB (0-255) to HSL

    Args:
        r: Red value (0-255)
        g: Green value (0-255)
        b: Blue value (0-255)

    Returns:
        (hue 0-360, saturation 0-100, lightness 0-100)

    Example:
        rgb_to_hsl(255, 0, 0)  # (0.0, 100.0, 50.0)
    """
    h, l, s = colorsys.rgb_to_hls(r / 255.0, g / 255.0, b / 255.0)
    return (h * 360.0, s * 100.0, l * 100.0)


def hsl_to_rgb(h: float, s: float, l: float) -> Tuple[float, float, float]:
    """
    Convert HSL back to RGB (0-255, unrounded)

    Example:
        hsl_to_rgb(120, 100, 50)  # (0.0, 255.0, 0.0)
    """
    r, g, b = colorsys.hls_to_rgb((h % 360) / 360.0, l / 100.0, s / 100.0)
    return (r * 255.0, g * 255.0, b * 255.0)


def gamma_correct(value: float, gamma: float = 2.2) -> float:
    """Map a perceptual 0-255 channel to linear LED drive level."""
    return ((value / 255.0) ** gamma) * 255.0


def round_half_up(value: float) -> int:
    """Round halves up: 2.5 -> 3, unlike round()."""
    return int(math.floor(value + 0.5))


def increase_luminosity(r: float, g: float, b: float, amount: float) -> Tuple[int, int, int]:
    """
    Lift HSL lightness by `amount` percentage points (capped at 100)

    HSL is rounded to whole units before the lift and the result to whole
    channel values, so the table matches web color tools exactly.
    Used to keep very dark pattern colors visible after gamma correction.
    """
    h, s, l = (round_half_up(v) for v in rgb_to_hsl(r, g, b))
    lifted = hsl_to_rgb(h, s, min(l + amount, 100))
    return tuple(round_half_up(c) for c in lifted)
