"""
Color model - pixel value and frame interpolation helpers

A Color carries float channels so interpolated values can stay fractional
until the realtime encoder truncates them to bytes.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Color:
    """
    RGB or RGBW pixel value

    Channels are 0-255 intensities. `w` is only meaningful on 4-channel
    devices; the encoder treats a missing white channel as 0.

    Examples:
        red = Color(255, 0, 0)
        warm = Color(255, 180, 120, w=40)
        r, g, b = red.to_rgb()
    """

    r: float
    g: float
    b: float
    w: Optional[float] = None

    # === CONSTRUCTORS ===

    @classmethod
    def black(cls) -> 'Color':
        return cls(0, 0, 0)

    @classmethod
    def from_hex(cls, value: str) -> 'Color':
        """
        Create from hex string ("#241f31" or "241f31")

        Raises:
            ValueError: if the string is not 6 hex digits
        """
        value = value.lstrip('#')
        if len(value) != 6:
            raise ValueError(f"Expected 6 hex digits, got '{value}'")
        return cls(int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))

    # === CONVERSIONS ===

    def to_rgb(self) -> Tuple[int, int, int]:
        """Truncated (r, g, b) ints for display/debugging"""
        return (int(self.r), int(self.g), int(self.b))


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation: t=0 -> a, t=1 -> b"""
    return a + (b - a) * t


def clamp(n: float, minimum: float, maximum: float) -> float:
    return min(max(n, minimum), maximum)


def lerp_color(a: Color, b: Color, t: float) -> Color:
    """
    Interpolate two colors channel by channel

    White is interpolated only when both colors carry it, otherwise it
    becomes 0.
    """
    w = lerp(a.w, b.w, t) if a.w is not None and b.w is not None else 0
    return Color(
        lerp(a.r, b.r, t),
        lerp(a.g, b.g, t),
        lerp(a.b, b.b, t),
        w,
    )


def lerp_frame(a: Sequence[Color], b: Sequence[Color], t: float) -> List[Color]:
    """
    Interpolate two frames pixel by pixel

    Output length is the shorter of the two inputs.
    """
    length = min(len(a), len(b))
    return [lerp_color(a[i], b[i], t) for i in range(length)]


def blank_frame(size: int) -> List[Color]:
    """All-black frame of `size` pixels"""
    black = Color.black()
    return [black] * size
