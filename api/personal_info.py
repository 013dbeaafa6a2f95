"""
Personal Projects API: /api/personal-info

``?featured=true`` and ``?status=`` filter the list.
"""

from fastapi import APIRouter, Depends

from src.services.resources import PERSONAL_PROJECTS
from src.services.resource_service import ResourceService

from api.resources import add_toggle_featured, create_resource_router


def _extra_routes(router: APIRouter, get_service) -> None:

    @router.get("/statuses", summary="Distinct project statuses")
    async def list_statuses(service: ResourceService = Depends(get_service)):
        return await service.distinct("status")

    add_toggle_featured(router, get_service)


router = create_resource_router(
    PERSONAL_PROJECTS,
    "/api/personal-info",
    ["Personal Projects"],
    _extra_routes,
)
