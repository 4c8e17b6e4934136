"""
FastAPI Application Factory

Assembles the control API:
- /api/active         activity toggle (fade in/out)
- /api/health         liveness
- /api/v1/system/*    status and task introspection

Used by main_asyncio.py and by tests (with a test ServiceContainer).
"""

from typing import List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware.error_handler import register_exception_handlers
from api.routes import active, system
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)


def create_app(
    title: str = "Twinkly Realtime Controller",
    version: str = "1.0.0",
    docs_enabled: bool = True,
    cors_origins: Optional[List[str]] = None,
) -> FastAPI:
    app = FastAPI(
        title=title,
        version=version,
        docs_url="/docs" if docs_enabled else None,
        redoc_url=None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )

    # Home-automation dashboards call the toggle straight from the browser
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins or ["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(active.router, prefix="/api")
    app.include_router(system.router, prefix="/api/v1")

    @app.get("/api/health", tags=["System"])
    async def health_check():
        return {"status": "healthy", "service": "twinkly-realtime", "version": version}

    log.debug("Routes registered: /api/active, /api/health, /api/v1/system")
    return app
