"""
Easing functions

Pure mappings from normalized elapsed time (0.0-1.0) to normalized progress
(0.0-1.0). The tween scheduler is agnostic to which curve is used.
"""

from typing import Callable, Dict

EasingFunction = Callable[[float], float]


def ease_linear(t: float) -> float:
    """
    Linear easing (constant speed)

    Args:
        t: Progress (0.0 = start, 1.0 = end)

    Returns:
        Eased progress (0.0 to 1.0)
    """
    return t


def ease_in_quad(t: float) -> float:
    """Quadratic ease-in (slow start → fast end)"""
    return t * t


def ease_out_quad(t: float) -> float:
    """Quadratic ease-out (fast start → slow end)"""
    return 1 - (1 - t) * (1 - t)


def ease_in_out_quad(t: float) -> float:
    return 2 * t * t if t < 0.5 else 1 - (-2 * t + 2) ** 2 / 2


def ease_in_cubic(t: float) -> float:
    """Cubic ease-in (very slow start)"""
    return t * t * t


def ease_out_cubic(t: float) -> float:
    """Cubic ease-out (very slow end)"""
    return 1 - (1 - t) ** 3


def ease_in_out_cubic(t: float) -> float:
    """Cubic ease-in-out (very smooth acceleration/deceleration)"""
    return 4 * t ** 3 if t < 0.5 else 1 - (-2 * t + 2) ** 3 / 2


class Easing:
    """
    Named easing curves

    Example:
        tweener.tween(1.0, 2000, Easing.Out)
    """
    Linear = staticmethod(ease_linear)
    In = staticmethod(ease_in_cubic)
    Out = staticmethod(ease_out_cubic)
    InOut = staticmethod(ease_in_out_cubic)
    InQuad = staticmethod(ease_in_quad)
    OutQuad = staticmethod(ease_out_quad)
    InOutQuad = staticmethod(ease_in_out_quad)


EASINGS_BY_NAME: Dict[str, EasingFunction] = {
    "linear": ease_linear,
    "in": ease_in_cubic,
    "out": ease_out_cubic,
    "in_out": ease_in_out_cubic,
    "in_quad": ease_in_quad,
    "out_quad": ease_out_quad,
    "in_out_quad": ease_in_out_quad,
}


def easing_by_name(name: str) -> EasingFunction:
    """
    Look up an easing curve by config name

    Raises:
        ValueError: for unknown names
    """
    try:
        return EASINGS_BY_NAME[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown easing '{name}'. Available: {list(EASINGS_BY_NAME.keys())}")
