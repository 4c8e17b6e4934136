"""
API Dependencies - service container access for FastAPI endpoints

main_asyncio.py builds the ServiceContainer, calls set_service_container(),
and endpoints receive it through Depends(get_service_container).

Example:
    @router.get("/active")
    async def get_active(services: ServiceContainer = Depends(get_service_container)):
        return {"active": services.activity.active}
"""

from typing import Optional

from api.middleware.error_handler import ServiceUnavailableError
from services.service_container import ServiceContainer

_service_container: Optional[ServiceContainer] = None


def set_service_container(services: Optional[ServiceContainer]) -> None:
    global _service_container
    _service_container = services


async def get_service_container() -> ServiceContainer:
    """
    Raises:
        ServiceUnavailableError: services not initialized yet (503)
    """
    if _service_container is None:
        raise ServiceUnavailableError("Service container not initialized. Controller may still be starting.")
    return _service_container
