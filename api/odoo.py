"""
Odoo Modules API: /api/odoo

Extra endpoints:
- GET /categories      distinct categories
- GET /stats           totals, per-category and per-status counts, clients
- PUT /{id}/clients    set ``clientsUsing``
"""

from fastapi import APIRouter, Depends, Request

from src.auth.dependencies import require_admin
from src.services.resources import ODOO_MODULES
from src.services.resource_service import ResourceService

from api.dependencies import read_json_body
from api.resources import create_resource_router


def _extra_routes(router: APIRouter, get_service) -> None:

    @router.get("/categories", summary="Distinct module categories")
    async def list_categories(service: ResourceService = Depends(get_service)):
        return await service.distinct("category")

    @router.get("/stats", summary="Module statistics")
    async def module_stats(service: ResourceService = Depends(get_service)):
        return await service.stats()

    @router.put("/{item_id}/clients", summary="Update client count")
    async def update_clients(
        item_id: str,
        request: Request,
        claims=Depends(require_admin),
        service: ResourceService = Depends(get_service),
    ):
        body = await read_json_body(request)
        return await service.set_field(item_id, "clientsUsing", body.get("clientsUsing"))


router = create_resource_router(ODOO_MODULES, "/api/odoo", ["Odoo Modules"], _extra_routes)
