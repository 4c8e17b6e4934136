"""
Shutdown handler protocol

Components that hold resources (sockets, tasks, the HTTP server) expose a
handler so the ShutdownCoordinator can release them in order.
"""

from typing import Protocol


class IShutdownHandler(Protocol):
    """
    Example:
        class DeviceShutdownHandler:
            @property
            def shutdown_priority(self) -> int:
                return 30

            async def shutdown(self) -> None:
                await self.client.close()
    """

    @property
    def shutdown_priority(self) -> int:
        """Higher priority shuts down earlier."""
        ...

    async def shutdown(self) -> None:
        ...
