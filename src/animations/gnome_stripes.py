"""
Gnome Dark Stripes

Purple-to-orange stripe pattern scrolled along the strip. The pattern
reverses every other repetition so it tiles without a seam.
"""

import math
from typing import List

from animations.base import BaseAnimation
from models.color import Color, lerp_frame
from utils.colors import gamma_correct, increase_luminosity

GNOME_DARK_STRIPES_HEX = [
    "241f31", "30223b", "4e254a", "56244b", "5f244c",
    "67234d", "70234e", "921f48", "af2438", "b32931",
    "b82e2a", "bc3323", "c1381d", "c64600", "e66100",
]

GAMMA = 2.2
LUMINOSITY_BOOST = 10


def _prepare(hex_value: str) -> Color:
    # gamma correct, then lift lightness so the darkest purples stay visible
    base = Color.from_hex(hex_value)
    r, g, b = (gamma_correct(c, GAMMA) for c in (base.r, base.g, base.b))
    return Color(*increase_luminosity(r, g, b, LUMINOSITY_BOOST))


def _build_pattern() -> List[Color]:
    c = [_prepare(h) for h in GNOME_DARK_STRIPES_HEX]
    # edge runs are half length: mirrored they join into full 4-pixel runs
    return (
        [c[0]] * 2
        + [c[1]] * 4
        + [c[2], c[3], c[4], c[5]]
        + [c[6]] * 4
        + [c[7]] * 4
        + [c[8], c[9], c[10], c[11]]
        + [c[12]] * 4
        + [c[13]] * 4
        + [c[14]] * 2
    )


GNOME_DARK_STRIPES_PATTERN: List[Color] = _build_pattern()


def pattern_index(i: int, length: int) -> int:
    """Mirrored lookup: forward on even repetitions, reversed on odd ones."""
    index = i % length
    if (i // length) % 2 == 1:
        index = length - 1 - index
    return index


def gnome_dark_stripes(size: int, offset: int = 0) -> List[Color]:
    pattern = GNOME_DARK_STRIPES_PATTERN
    length = len(pattern)
    return [pattern[pattern_index(i + offset, length)] for i in range(size)]


class GnomeStripesAnimation(BaseAnimation):
    """
    Scrolling stripes with sub-pixel smoothing

    The pattern advances `offset_per_second` pixels per second; between
    whole offsets the two neighbouring frames are cross-faded.
    """

    def __init__(self, offset_per_second: float = 3.0):
        self.offset_per_second = offset_per_second

    def render(self, elapsed_s: float, size: int) -> List[Color]:
        scaled = elapsed_s * self.offset_per_second
        offset = math.floor(scaled)
        t = scaled - offset
        a = gnome_dark_stripes(size, offset)
        b = gnome_dark_stripes(size, offset + 1)
        return lerp_frame(a, b, t)

    def duration_s(self) -> float:
        # a forward + mirrored pass takes 2*len/offset_per_second seconds, which is
        # fractional; scaling by offset_per_second again lands on whole seconds
        return len(GNOME_DARK_STRIPES_PATTERN) * 2 * self.offset_per_second
