from __future__ import annotations

import asyncio
from typing import List, Optional

from lifecycle.shutdown_protocol import IShutdownHandler
from lifecycle.task_registry import TaskRegistry
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)


class TaskCancellationHandler(IShutdownHandler):
    """
    Cancels and awaits tasks left running at the end of shutdown.

    With an explicit list only those tasks are cancelled; otherwise every
    still-running tracked task is.

    Priority: 40
    """

    def __init__(self, tasks: Optional[List[asyncio.Task]] = None):
        self.tasks = tasks

    @property
    def shutdown_priority(self) -> int:
        return 40

    async def shutdown(self) -> None:
        tasks = self.tasks if self.tasks is not None else TaskRegistry.instance().get_tasks_for_shutdown(
            exclude=[asyncio.current_task()]
        )
        pending = [t for t in tasks if not t.done()]
        log.info(f"Cancelling {len(pending)} background task(s)...")

        for task in pending:
            task.cancel()
            log.debug(f"Cancelled task: {task.get_name()}")

        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
