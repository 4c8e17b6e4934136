"""
Animations for the realtime frame loop

- base: BaseAnimation contract (pure function of elapsed time)
- gnome_stripes: scrolling Gnome dark stripes
"""

from .base import BaseAnimation
from .gnome_stripes import GnomeStripesAnimation, gnome_dark_stripes

__all__ = ["BaseAnimation", "GnomeStripesAnimation", "gnome_dark_stripes"]
