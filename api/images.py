"""
Images API: /api/images

Gallery images grouped by station; ``?station=`` filters the list.
"""

from fastapi import APIRouter, Depends

from src.services.resources import IMAGES
from src.services.resource_service import ResourceService

from api.resources import create_resource_router


def _extra_routes(router: APIRouter, get_service) -> None:

    @router.get("/stations", summary="Distinct stations")
    async def list_stations(service: ResourceService = Depends(get_service)):
        return await service.distinct("station")


router = create_resource_router(IMAGES, "/api/images", ["Images"], _extra_routes)
