"""
LinkedIn Profile API: /api/linkedin

The current profile is the most recently created one.

Endpoints:
- GET    /                               current profile (public)
- POST   /                               create or merge into the current profile
- PUT    /{id}                           merge into a profile by id
- DELETE /{id}                           delete a profile
- POST   /{id}/{section}                 add an item (experience, education,
                                         skills, certifications, recommendations)
- PUT    /{id}/{section}/{item_id}       update an item
- DELETE /{id}/{section}/{item_id}       remove an item
"""

import logging

from fastapi import APIRouter, Depends, Request

from src.auth.dependencies import optional_admin, require_admin
from src.services.profile_service import ProfileService

from api.dependencies import get_profile_service, read_json_body

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/linkedin", tags=["LinkedIn"])


@router.get("", summary="Get current LinkedIn profile")
async def get_profile(
    claims=Depends(optional_admin),
    service: ProfileService = Depends(get_profile_service),
):
    return await service.get_current()


@router.post("", summary="Create or update LinkedIn profile")
async def upsert_profile(
    request: Request,
    claims=Depends(require_admin),
    service: ProfileService = Depends(get_profile_service),
):
    return await service.upsert(await read_json_body(request))


@router.put("/{profile_id}", summary="Update LinkedIn profile by id")
async def update_profile(
    profile_id: str,
    request: Request,
    claims=Depends(require_admin),
    service: ProfileService = Depends(get_profile_service),
):
    return await service.update(profile_id, await read_json_body(request))


@router.delete("/{profile_id}", summary="Delete LinkedIn profile")
async def delete_profile(
    profile_id: str,
    claims=Depends(require_admin),
    service: ProfileService = Depends(get_profile_service),
):
    return await service.delete(profile_id)


# =============================================================================
# SECTION ITEMS
# =============================================================================

@router.post("/{profile_id}/{section}", summary="Add a profile section item")
async def add_section_item(
    profile_id: str,
    section: str,
    request: Request,
    claims=Depends(require_admin),
    service: ProfileService = Depends(get_profile_service),
):
    return await service.add_item(profile_id, section, await read_json_body(request))


@router.put("/{profile_id}/{section}/{item_id}", summary="Update a profile section item")
async def update_section_item(
    profile_id: str,
    section: str,
    item_id: str,
    request: Request,
    claims=Depends(require_admin),
    service: ProfileService = Depends(get_profile_service),
):
    return await service.update_item(profile_id, section, item_id, await read_json_body(request))


@router.delete("/{profile_id}/{section}/{item_id}", summary="Remove a profile section item")
async def remove_section_item(
    profile_id: str,
    section: str,
    item_id: str,
    claims=Depends(require_admin),
    service: ProfileService = Depends(get_profile_service),
):
    return await service.remove_item(profile_id, section, item_id)
