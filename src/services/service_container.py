"""Service Container - shared objects for API endpoints"""

from dataclasses import dataclass
from typing import Optional

from engine.frame_driver import FrameDriver
from engine.tween_manager import TweenManager
from hardware.twinkly.client import TwinklyClient
from models.config import AppConfig
from services.activity_service import ActivityService


@dataclass
class ServiceContainer:
    """
    Everything the control API needs, built once in main_asyncio.py and
    handed to api.dependencies.set_service_container().
    """

    config: AppConfig
    client: TwinklyClient
    tween_manager: TweenManager
    activity: ActivityService
    frame_driver: Optional[FrameDriver] = None
