"""
Activity endpoints - fade the lights in/out

POST never fails on bad input: a malformed body, a non-object body or a
missing/null `active` key leaves the state untouched and echoes it back.
"""

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from api.dependencies import get_service_container
from api.schemas.active import ActiveRequest, ActiveResponse
from services.service_container import ServiceContainer
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)

router = APIRouter(tags=["Activity"])


@router.get("/active", response_model=ActiveResponse)
async def get_active(services: ServiceContainer = Depends(get_service_container)) -> ActiveResponse:
    return ActiveResponse(active=services.activity.active)


@router.post("/active", response_model=ActiveResponse)
async def set_active(
    request: Request,
    services: ServiceContainer = Depends(get_service_container),
) -> ActiveResponse:
    """
    Body: {"active": true|false}

    Returns immediately; the fade runs on the frame loop.
    """
    activity = services.activity

    try:
        payload = ActiveRequest.model_validate(await request.json())
    except (ValueError, ValidationError) as e:
        log.debug("Ignoring malformed /api/active body", error=str(e))
        return ActiveResponse(active=activity.active)

    if payload.active is None:
        log.debug("Ignoring /api/active body without 'active'")
        return ActiveResponse(active=activity.active)

    return ActiveResponse(active=activity.set_active(payload.active))
