"""
Resource Router Factory

Every resource exposes the same five routes:
- GET    /            list (public, optional token, query filters)
- GET    /{id}        single entity (public)
- POST   /            create (admin, 201, JSON or multipart)
- PUT    /{id}        partial update (admin, JSON or multipart)
- DELETE /{id}        delete (admin)

Resource-specific routes are registered through ``extra_routes`` before the
``/{id}`` routes so fixed paths like ``/stations`` are matched first.
"""

import logging
from typing import Callable, List, Optional

from fastapi import APIRouter, Depends, Request, status

from src.auth.dependencies import optional_admin, require_admin
from src.services.resource_service import ResourceDefinition, ResourceService

from api.dependencies import read_payload, resource_service

logger = logging.getLogger(__name__)

ExtraRoutes = Callable[[APIRouter, Callable[..., ResourceService]], None]


def create_resource_router(
    definition: ResourceDefinition,
    prefix: str,
    tags: List[str],
    extra_routes: Optional[ExtraRoutes] = None,
) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=tags)
    get_service = resource_service(definition)
    label = definition.label

    if extra_routes is not None:
        extra_routes(router, get_service)

    @router.get("", name=f"list_{definition.name}", summary=f"List {label.lower()}s")
    async def list_items(
        request: Request,
        claims=Depends(optional_admin),
        service: ResourceService = Depends(get_service),
    ):
        return await service.list(dict(request.query_params))

    @router.get("/{item_id}", name=f"get_{definition.name}", summary=f"Get {label.lower()}")
    async def get_item(
        item_id: str,
        service: ResourceService = Depends(get_service),
    ):
        return await service.get(item_id)

    @router.post(
        "",
        name=f"create_{definition.name}",
        summary=f"Create {label.lower()}",
        status_code=status.HTTP_201_CREATED,
    )
    async def create_item(
        request: Request,
        claims=Depends(require_admin),
        service: ResourceService = Depends(get_service),
    ):
        payload, files = await read_payload(request, definition.media_field)
        return await service.create(payload, files)

    @router.put("/{item_id}", name=f"update_{definition.name}", summary=f"Update {label.lower()}")
    async def update_item(
        item_id: str,
        request: Request,
        claims=Depends(require_admin),
        service: ResourceService = Depends(get_service),
    ):
        payload, files = await read_payload(request, definition.media_field)
        return await service.update(item_id, payload, files)

    @router.delete("/{item_id}", name=f"delete_{definition.name}", summary=f"Delete {label.lower()}")
    async def delete_item(
        item_id: str,
        claims=Depends(require_admin),
        service: ResourceService = Depends(get_service),
    ):
        return await service.delete(item_id)

    return router


def add_toggle_featured(router: APIRouter, get_service: Callable[..., ResourceService]) -> None:
    """PUT /{id}/toggle-featured"""

    @router.put("/{item_id}/toggle-featured", summary="Toggle featured flag")
    async def toggle_featured(
        item_id: str,
        claims=Depends(require_admin),
        service: ResourceService = Depends(get_service),
    ):
        return await service.toggle_featured(item_id)
