"""
Shutdown coordinator

Waits for either an OS signal or the failure of a critical task, then runs
the registered shutdown handlers in priority order (highest first), each
under its own timeout.
"""

import asyncio
import signal
from typing import List, Optional, Set

from lifecycle.task_registry import TaskCategory, TaskRegistry
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SYSTEM)

CRITICAL_CATEGORIES: Set[TaskCategory] = {
    TaskCategory.API,     # control surface must stay up
    TaskCategory.RENDER,  # frame loop; fails on ConfigurationError
}


class ShutdownCoordinator:
    """
    Example:
        coordinator = ShutdownCoordinator()
        coordinator.register(FrameDriverShutdownHandler(driver))
        coordinator.register(DeviceShutdownHandler(client))

        coordinator.setup_signal_handlers(loop)
        await coordinator.wait_for_shutdown()
        await coordinator.shutdown_all()
    """

    def __init__(
        self,
        timeout_per_handler: float = 5.0,
        total_timeout: float = 15.0,
        registry: Optional[TaskRegistry] = None,
    ):
        self._handlers: List = []
        self._shutdown_event = asyncio.Event()
        self._timeout_per_handler = timeout_per_handler
        self._total_timeout = total_timeout
        self._registry = registry
        self.reason: Optional[str] = None

    @property
    def registry(self) -> TaskRegistry:
        return self._registry or TaskRegistry.instance()

    def register(self, handler) -> None:
        """
        Raises:
            ValueError: handler lacks shutdown_priority or shutdown()
        """
        if not hasattr(handler, "shutdown_priority"):
            raise ValueError(f"Handler {handler} missing shutdown_priority property")
        if not hasattr(handler, "shutdown"):
            raise ValueError(f"Handler {handler} missing shutdown() method")
        self._handlers.append(handler)
        log.debug(f"Registered shutdown handler: {handler.__class__.__name__}")

    def setup_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, lambda s=sig: self.request_shutdown(s.name))
        log.info("Signal handlers installed (SIGINT, SIGTERM)")

    def request_shutdown(self, reason: str) -> None:
        if not self._shutdown_event.is_set():
            self.reason = reason
            log.info(f"Shutdown requested: {reason}")
            self._shutdown_event.set()

    @property
    def shutdown_requested(self) -> bool:
        return self._shutdown_event.is_set()

    # === Monitoring ===

    def _critical_failure(self) -> Optional[str]:
        for record in self.registry.failed():
            if record.info.category in CRITICAL_CATEGORIES:
                return record.info.description
        return None

    def _critical_tasks(self) -> List[asyncio.Task]:
        return [r.task for r in self.registry.active() if r.info.category in CRITICAL_CATEGORIES]

    async def wait_for_shutdown(self, poll_interval: float = 0.5) -> None:
        """Return once a signal arrives or a critical task has failed."""
        while not self._shutdown_event.is_set():
            failed = self._critical_failure()
            if failed:
                log.error(f"Critical task failed: {failed}")
                self.request_shutdown(f"Task failure: {failed}")
                return

            waiter = asyncio.ensure_future(self._shutdown_event.wait())
            try:
                # wake on signal, on any critical task ending, or periodically to
                # pick up critical tasks registered after this call
                await asyncio.wait(
                    {waiter, *self._critical_tasks()},
                    timeout=poll_interval,
                    return_when=asyncio.FIRST_COMPLETED,
                )
            finally:
                if not waiter.done():
                    waiter.cancel()

    async def shutdown_all(self) -> None:
        log.info("Initiating graceful shutdown sequence...", reason=self.reason or "UNKNOWN")

        loop = asyncio.get_running_loop()
        start = loop.time()

        for handler in sorted(self._handlers, key=lambda h: h.shutdown_priority, reverse=True):
            name = handler.__class__.__name__

            elapsed = loop.time() - start
            if elapsed > self._total_timeout:
                log.error(f"Total shutdown timeout exceeded ({elapsed:.1f}s > {self._total_timeout}s)")
                break

            try:
                log.debug(f"Shutting down {name} (priority={handler.shutdown_priority})...")
                await asyncio.wait_for(handler.shutdown(), timeout=self._timeout_per_handler)
            except asyncio.TimeoutError:
                log.error(f"{name} shutdown timeout ({self._timeout_per_handler}s)")
            except Exception as e:
                log.error(f"Error shutting down {name}: {e}", exc_info=True)

        log.info("Shutdown sequence complete")
