from __future__ import annotations

import asyncio
import contextlib
from typing import Optional

import uvicorn
from fastapi import FastAPI

from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)


class APIServerWrapper:
    """
    Runs uvicorn inside the application's event loop with uvicorn's own
    signal handlers disabled, so SIGINT/SIGTERM reach the ShutdownCoordinator.

    start() serves until stop() is called; schedule it with
    create_tracked_task(category=TaskCategory.API).
    """

    def __init__(self, app: FastAPI, host: str = "0.0.0.0", port: int = 12345):
        self.app = app
        self.host = host
        self.port = port
        self._server: Optional[uvicorn.Server] = None
        self._serve_task: Optional[asyncio.Task] = None
        self._stop_event = asyncio.Event()

    def _create_server(self) -> uvicorn.Server:
        config = uvicorn.Config(
            app=self.app,
            host=self.host,
            port=self.port,
            loop="asyncio",
            log_level="warning",
            access_log=False,
            server_header=False,
        )
        server = uvicorn.Server(config)
        server.install_signal_handlers = lambda: None  # type: ignore
        server.capture_signals = contextlib.nullcontext  # type: ignore  # uvicorn >= 0.29
        return server

    async def start(self, *, wait_started_timeout: float = 5.0) -> None:
        """
        Raises:
            RuntimeError: already started
        """
        if self.is_running:
            raise RuntimeError("API server already started")

        self._server = self._create_server()
        self._stop_event.clear()

        log.info(f"Launching API server on http://{self.host}:{self.port}")
        self._serve_task = asyncio.create_task(self._server.serve(), name="UvicornServe")

        try:
            await self._wait_started(wait_started_timeout)
            await self._stop_event.wait()
        except asyncio.CancelledError:
            await self.stop()
            raise

    async def _wait_started(self, timeout: float) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while loop.time() < deadline:
            if getattr(self._server, "started", False):
                log.info("API server started")
                return
            if self._serve_task.done():
                # surface the serve() exception so the API task fails
                await self._serve_task
                raise RuntimeError("API server exited during startup")
            await asyncio.sleep(0.05)
        log.warn(f"API server not started after {timeout:g}s")

    async def stop(self, *, shutdown_timeout: float = 2.0) -> None:
        self._stop_event.set()

        if self._server is None:
            log.debug("API server stop() called but server was not running")
            return

        log.info("Stopping API server...")
        self._server.should_exit = True
        self._server.force_exit = True

        if self._serve_task is not None and not self._serve_task.done():
            try:
                await asyncio.wait_for(asyncio.shield(self._serve_task), timeout=shutdown_timeout)
            except asyncio.TimeoutError:
                log.warn("API server did not exit in time, cancelling")
                self._serve_task.cancel()
                try:
                    await self._serve_task
                except asyncio.CancelledError:
                    pass

        self._server = None
        self._serve_task = None
        log.info("API server stopped")

    @property
    def is_running(self) -> bool:
        return self._serve_task is not None and not self._serve_task.done()

    @property
    def server(self) -> Optional[uvicorn.Server]:
        return self._server
