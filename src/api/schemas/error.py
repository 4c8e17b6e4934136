"""
Error schemas - JSON envelope returned by every API error handler
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ErrorDetail(BaseModel):
    code: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional context")
    timestamp: datetime = Field(default_factory=_utcnow)


class ErrorResponse(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": {
                    "code": "DEVICE_NOT_READY",
                    "message": "Device info not loaded - call init() first",
                    "details": None,
                    "timestamp": "2025-11-26T10:30:00Z",
                },
                "request_id": "0f8f2a5e-...",
            }
        }
    )

    error: ErrorDetail
    request_id: Optional[str] = None
