"""
TweenManager - time-based value transitions driven by the frame loop

A Tweener owns one numeric value. tween() starts a transition from the
value interpolated at the moment of the call to a target; update() on the
manager advances every running transition and reports the new value to the
tweener's callback.

Supersede semantics: retriggering a tween mid-flight restarts from the
current interpolated value, so there is never a jump.

Completion: when progress reaches 1 the callback fires once more with the
exact target and the tweener goes idle until the next tween() call.
"""

from __future__ import annotations

import time
from typing import Callable, List, Optional

from models.color import clamp, lerp
from models.easing import Easing, EasingFunction
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TWEEN)

Clock = Callable[[], float]
TweenCallback = Callable[[float], None]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class Tweener:
    """
    Handle for one animated value

    Example:
        tweener = manager.new_tweener(lambda v: print(v), 0.0)
        tweener.tween(1.0, 2000, Easing.Out)
    """

    def __init__(self, manager: "TweenManager", callback: TweenCallback, initial_value: float):
        self._manager = manager
        self._callback = callback

        self.start_value = initial_value
        self.target_value = initial_value
        self.start_time = 0.0
        self.duration_ms = 0.0
        self.easing: EasingFunction = Easing.Linear

        self.value = initial_value
        self.active = False

    def tween(self, target: float, duration_ms: float, easing: Optional[EasingFunction] = None) -> None:
        """Transition to `target` over `duration_ms`, starting from the current value."""
        now = self._manager.now()
        current = self.value_at(now)

        self.start_value = current
        self.value = current
        self.target_value = target
        self.start_time = now
        self.duration_ms = max(0.0, duration_ms)
        self.easing = easing or Easing.Linear
        self.active = True

        log.debug("Tween started", start=round(current, 3), target=target, duration_ms=self.duration_ms)

    def value_at(self, now: float) -> float:
        if not self.active:
            return self.value
        t = self._progress(now)
        return lerp(self.start_value, self.target_value, self.easing(t))

    def _progress(self, now: float) -> float:
        if self.duration_ms <= 0:
            return 1.0
        return clamp((now - self.start_time) / self.duration_ms, 0.0, 1.0)

    def _step(self, now: float) -> None:
        t = self._progress(now)
        if t >= 1.0:
            self.value = self.target_value
            self.active = False
        else:
            self.value = lerp(self.start_value, self.target_value, self.easing(t))
        self._callback(self.value)

    def __repr__(self) -> str:
        return f"Tweener(value={self.value:.3f}, target={self.target_value}, active={self.active})"


class TweenManager:
    """
    Registry of tweeners advanced once per tick

    Single-threaded: update() and tween() must be called from the event loop
    thread. Callbacks run inline and must not block.
    """

    def __init__(self, clock: Optional[Clock] = None):
        """
        Args:
            clock: Monotonic time source in milliseconds (injectable for tests)
        """
        self._clock = clock or monotonic_ms
        self.tweeners: List[Tweener] = []

    def now(self) -> float:
        return self._clock()

    def new_tweener(self, callback: TweenCallback, initial_value: float = 0.0) -> Tweener:
        tweener = Tweener(self, callback, initial_value)
        self.tweeners.append(tweener)
        return tweener

    def update(self) -> None:
        """Advance all active tweeners to the current clock time."""
        now = self.now()
        for tweener in self.tweeners:
            if tweener.active:
                tweener._step(now)

    @property
    def active_count(self) -> int:
        return sum(1 for t in self.tweeners if t.active)
