"""
Activity Service

Holds the on/off ("active") state exposed by the control API and the
opacity it fades. set_active() returns immediately; the fade is carried out
by the tween scheduler on subsequent frame ticks.
"""

from typing import Callable, Optional

from engine.tween_manager import TweenManager
from models.easing import Easing, EasingFunction
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TWEEN)

OpacityHook = Callable[[float], None]


class ActivityService:
    """
    Example:
        activity = ActivityService(tween_manager, fade_duration_ms=2000)
        activity.set_active(False)   # opacity eases 1 → 0 over 2 s
    """

    def __init__(
        self,
        tween_manager: TweenManager,
        fade_duration_ms: float = 2000,
        easing: EasingFunction = Easing.Out,
        initial_active: bool = True,
        on_opacity: Optional[OpacityHook] = None,
    ):
        """
        Args:
            tween_manager: Scheduler that animates opacity
            fade_duration_ms: Fade length for every activation change
            easing: Fade curve
            initial_active: Starting state (opacity 1 when active, else 0)
            on_opacity: Called with every new opacity value (movie mode pushes
                it to the device as brightness)
        """
        self.fade_duration_ms = fade_duration_ms
        self.easing = easing
        self.on_opacity = on_opacity

        self.active = initial_active
        self.opacity = 1.0 if initial_active else 0.0
        self.tweener = tween_manager.new_tweener(self._apply_opacity, self.opacity)

    def _apply_opacity(self, value: float) -> None:
        self.opacity = value
        if self.on_opacity is not None:
            self.on_opacity(value)

    def set_active(self, active: bool) -> bool:
        """Store the flag and start fading toward 1 (active) or 0. Returns the new state."""
        self.active = bool(active)
        target = 1.0 if self.active else 0.0
        self.tweener.tween(target, self.fade_duration_ms, self.easing)
        log.info(f"Active set to {self.active}", opacity=round(self.opacity, 3), target=target)
        return self.active

    def get_opacity(self) -> float:
        return self.opacity

    def get_status(self) -> dict:
        return {
            "active": self.active,
            "opacity": round(self.opacity, 4),
            "fading": self.tweener.active,
        }
