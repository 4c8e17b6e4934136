from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class DeviceStatus(BaseModel):
    ip: str
    initialized: bool
    authenticated: bool
    info: Optional[Dict[str, Any]] = Field(None, description="gestalt: leds, bytes per led, frame rate")


class SystemStatusResponse(BaseModel):
    run_mode: str
    device: DeviceStatus
    activity: Dict[str, Any]
    frame_driver: Optional[Dict[str, Any]] = None
    realtime: Optional[Dict[str, Any]] = None
    tasks: str


class TaskListResponse(BaseModel):
    count: int
    tasks: List[Dict[str, Any]]
