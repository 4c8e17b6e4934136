from .api_server_shutdown_handler import APIServerShutdownHandler
from .device_shutdown_handler import DeviceShutdownHandler
from .frame_driver_shutdown_handler import FrameDriverShutdownHandler
from .task_cancellation_handler import TaskCancellationHandler

__all__ = [
    "APIServerShutdownHandler",
    "DeviceShutdownHandler",
    "FrameDriverShutdownHandler",
    "TaskCancellationHandler",
]
