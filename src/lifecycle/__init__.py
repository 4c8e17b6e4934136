"""
Lifecycle subsystem
-------------------

- task tracking & introspection
- graceful shutdown (signals, critical task failure, ordered handlers)
- uvicorn embedding

    from lifecycle import ShutdownCoordinator, create_tracked_task, TaskCategory
    from lifecycle.handlers import DeviceShutdownHandler
"""

from .shutdown_coordinator import ShutdownCoordinator
from .task_registry import TaskRegistry, TaskCategory, TaskInfo, create_tracked_task
from .shutdown_protocol import IShutdownHandler

__all__ = [
    "ShutdownCoordinator",
    "TaskRegistry",
    "TaskCategory",
    "TaskInfo",
    "create_tracked_task",
    "IShutdownHandler",
]
