"""
System endpoints - device status, frame loop metrics, task introspection
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_service_container
from api.schemas.system import DeviceStatus, SystemStatusResponse, TaskListResponse
from lifecycle.task_registry import TaskRegistry
from services.service_container import ServiceContainer

router = APIRouter(prefix="/system", tags=["System"])


@router.get("/status", response_model=SystemStatusResponse)
async def get_status(services: ServiceContainer = Depends(get_service_container)) -> SystemStatusResponse:
    client = services.client
    info = client.info
    sender = client.sender

    return SystemStatusResponse(
        run_mode=services.config.run_mode.value,
        device=DeviceStatus(
            ip=client.ip,
            initialized=client.initialized,
            authenticated=client.session.authenticated,
            info=info.to_dict() if info else None,
        ),
        activity=services.activity.get_status(),
        frame_driver=services.frame_driver.get_metrics() if services.frame_driver else None,
        realtime={
            "open": sender.is_open,
            "local_port": sender.local_port,
            "packets_sent": sender.packets_sent,
            "frames_dropped": sender.frames_dropped,
            "send_errors": sender.send_errors,
        },
        tasks=TaskRegistry.instance().summary(),
    )


@router.get("/tasks", response_model=TaskListResponse)
async def get_all_tasks() -> TaskListResponse:
    records = TaskRegistry.instance().list_all()
    return TaskListResponse(count=len(records), tasks=[r.to_dict() for r in records])


@router.get("/tasks/failed", response_model=TaskListResponse)
async def get_failed_tasks() -> TaskListResponse:
    records = TaskRegistry.instance().failed()
    return TaskListResponse(count=len(records), tasks=[r.to_dict() for r in records])
