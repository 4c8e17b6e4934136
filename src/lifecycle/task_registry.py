"""
Task Registry
-------------

Every long-lived asyncio task (frame loop, keep-alive, API server, brightness
pushes) is created through create_tracked_task() so that:

- failures are logged the moment the task ends
- the shutdown coordinator can watch critical categories
- /api/v1/system/tasks can list what is running
"""

from __future__ import annotations

import asyncio
import traceback
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TASK)


class TaskCategory(Enum):
    """Logical grouping of asynchronous tasks."""
    API = auto()
    RENDER = auto()
    SESSION = auto()
    REALTIME = auto()
    SYSTEM = auto()
    BACKGROUND = auto()
    GENERAL = auto()


@dataclass(frozen=True)
class TaskInfo:
    """Metadata captured when the task is created."""
    id: int
    category: TaskCategory
    description: str
    created_at: str
    created_timestamp: float
    origin_stack: str


@dataclass
class TaskRecord:
    task: asyncio.Task
    info: TaskInfo
    cancelled: bool = False
    finished_with_error: Optional[BaseException] = None
    finished_at: Optional[str] = None

    @property
    def status(self) -> str:
        if not self.task.done():
            return "running"
        if self.cancelled:
            return "cancelled"
        if self.finished_with_error is not None:
            return "failed"
        return "completed"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.info.id,
            "category": self.info.category.name,
            "description": self.info.description,
            "created_at": self.info.created_at,
            "finished_at": self.finished_at,
            "status": self.status,
            "error": repr(self.finished_with_error) if self.finished_with_error else None,
        }


class TaskRegistry:
    """
    Process-wide registry of tracked tasks

    Finished records are kept (up to `max_finished`) so failures stay
    visible after the fact.
    """

    _instance: Optional["TaskRegistry"] = None

    def __init__(self, max_finished: int = 200) -> None:
        self._records: Dict[int, TaskRecord] = {}
        self._next_id = 1
        self.max_finished = max_finished

    @classmethod
    def instance(cls) -> "TaskRegistry":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton (tests)."""
        cls._instance = None

    def register(self, task: asyncio.Task, category: TaskCategory, description: str) -> int:
        task_id = self._next_id
        self._next_id += 1

        now = datetime.now(timezone.utc)
        info = TaskInfo(
            id=task_id,
            category=category,
            description=description,
            created_at=now.isoformat(),
            created_timestamp=now.timestamp(),
            origin_stack="".join(traceback.format_stack(limit=6)[:-1]),
        )
        self._records[task_id] = TaskRecord(task=task, info=info)
        task.add_done_callback(self._on_task_done)

        log.debug(f"[Task {task_id}] Registered ({category.name}) - {description}")
        return task_id

    def _on_task_done(self, task: asyncio.Task) -> None:
        record = self._get_record_by_task(task)
        if record is None:
            return

        record.finished_at = datetime.now(timezone.utc).isoformat()
        if task.cancelled():
            record.cancelled = True
            log.debug(f"[Task {record.info.id}] Cancelled")
        else:
            exc = task.exception()
            if exc is not None:
                record.finished_with_error = exc
                log.error(f"[Task {record.info.id}] FAILED ({record.info.description}): {exc!r}")
            else:
                log.debug(f"[Task {record.info.id}] Completed")

        self._prune()

    def _prune(self) -> None:
        finished = [r for r in self._records.values() if r.finished_at is not None and r.finished_with_error is None]
        excess = len(finished) - self.max_finished
        for record in finished[:max(0, excess)]:
            del self._records[record.info.id]

    def _get_record_by_task(self, task: asyncio.Task) -> Optional[TaskRecord]:
        for record in self._records.values():
            if record.task is task:
                return record
        return None

    # === Queries ===

    def list_all(self) -> List[TaskRecord]:
        return list(self._records.values())

    def active(self) -> List[TaskRecord]:
        return [r for r in self._records.values() if not r.task.done()]

    def failed(self) -> List[TaskRecord]:
        return [r for r in self._records.values() if r.finished_with_error is not None]

    def cancelled(self) -> List[TaskRecord]:
        return [r for r in self._records.values() if r.cancelled]

    def summary(self) -> str:
        return (
            f"Tasks: total={len(self._records)}, running={len(self.active())}, "
            f"failed={len(self.failed())}, cancelled={len(self.cancelled())}"
        )

    def get_tasks_for_shutdown(self, exclude: Optional[List[asyncio.Task]] = None) -> List[asyncio.Task]:
        exclude = exclude or []
        return [r.task for r in self._records.values() if not r.task.done() and r.task not in exclude]


def create_tracked_task(
    coro,
    *,
    category: TaskCategory,
    description: str,
    loop: Optional[asyncio.AbstractEventLoop] = None,
) -> asyncio.Task:
    """Create a task and register it in one call."""
    loop = loop or asyncio.get_running_loop()
    task = loop.create_task(coro, name=description)
    TaskRegistry.instance().register(task=task, category=category, description=description)
    return task
