"""
Journey API: /api/journey

Timeline steps sorted by ``order`` then creation time. PUT /reorder takes
``{"steps": [{"id": ..., "order": n}, ...]}``.
"""

from fastapi import APIRouter, Depends, Request

from src.auth.dependencies import require_admin
from src.services.resources import JOURNEY
from src.services.resource_service import ResourceService

from api.dependencies import read_json_body
from api.resources import create_resource_router


def _extra_routes(router: APIRouter, get_service) -> None:

    @router.put("/reorder", summary="Reorder journey steps")
    async def reorder_steps(
        request: Request,
        claims=Depends(require_admin),
        service: ResourceService = Depends(get_service),
    ):
        body = await read_json_body(request)
        return await service.reorder(body.get("steps"))


router = create_resource_router(JOURNEY, "/api/journey", ["Journey"], _extra_routes)
