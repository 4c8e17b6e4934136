"""
Error handling for the API

Converts exceptions raised inside endpoints into the ErrorResponse envelope:
- DomainError subclasses → their own status code
- DeviceNotReadyError → 503 (device still initializing)
- anything else → 500
"""

import uuid
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from api.schemas.error import ErrorDetail, ErrorResponse
from hardware.twinkly.errors import DeviceNotReadyError
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)


class DomainError(Exception):
    """Base class for errors an endpoint reports on purpose"""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
        status_code: int = 400,
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        super().__init__(message)


class ServiceUnavailableError(DomainError):
    def __init__(self, message: str):
        super().__init__(
            code="SERVICE_UNAVAILABLE",
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )


def _error_response(status_code: int, code: str, message: str, details: Optional[dict] = None) -> JSONResponse:
    request_id = str(uuid.uuid4())
    body = ErrorResponse(
        error=ErrorDetail(code=code, message=message, details=details),
        request_id=request_id,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(DomainError)
    async def domain_exception_handler(request: Request, exc: DomainError):
        log.warn(f"Domain error: {exc.code} - {exc.message}", path=request.url.path)
        return _error_response(exc.status_code, exc.code, exc.message, exc.details)

    @app.exception_handler(DeviceNotReadyError)
    async def device_not_ready_handler(request: Request, exc: DeviceNotReadyError):
        log.warn(f"Device not ready: {exc}", path=request.url.path)
        return _error_response(status.HTTP_503_SERVICE_UNAVAILABLE, "DEVICE_NOT_READY", str(exc))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        log.error(f"Unexpected error: {type(exc).__name__}: {exc}", path=request.url.path)
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "INTERNAL_SERVER_ERROR",
            "An unexpected error occurred.",
        )
