"""
Shared API Dependencies

Wires the per-request collaborators (store session, cache, media host)
into the services, and parses request bodies that may arrive either as
JSON or as multipart forms with files.
"""

import json
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from fastapi import Depends, Request
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from src.cache.base import CacheBackend
from src.cache.config import get_cache_config
from src.cache.redis_cache import get_redis_cache
from src.database.models import LinkedinProfile
from src.database.repository import DocumentRepository
from src.database.session import get_db
from src.media.storage import MediaStorage, get_media_storage
from src.services.errors import ValidationError
from src.services.profile_service import ProfileService
from src.services.resource_service import (
    ResourceDefinition,
    ResourceService,
    UploadedFile,
)
from src.utils.config import get_settings

logger = logging.getLogger(__name__)


# =============================================================================
# COLLABORATORS
# =============================================================================

async def get_cache() -> CacheBackend:
    """Process-wide Redis cache (fail-open)."""
    return await get_redis_cache()


def get_media() -> MediaStorage:
    return get_media_storage()


def resource_service(definition: ResourceDefinition) -> Callable[..., ResourceService]:
    """Build a dependency yielding the ResourceService for ``definition``."""

    def _provide(
        db: Session = Depends(get_db),
        cache: CacheBackend = Depends(get_cache),
        media: MediaStorage = Depends(get_media),
    ) -> ResourceService:
        settings = get_settings()
        return ResourceService(
            definition,
            DocumentRepository(db, definition.model),
            cache,
            media=media,
            max_upload_bytes=settings.max_upload_bytes,
            max_files=settings.MAX_FILES_PER_REQUEST,
            cache_ttl=get_cache_config().default_ttl,
        )

    _provide.__name__ = f"get_{definition.name.replace('-', '_')}_service"
    return _provide


def get_profile_service(
    db: Session = Depends(get_db),
    cache: CacheBackend = Depends(get_cache),
) -> ProfileService:
    return ProfileService(
        DocumentRepository(db, LinkedinProfile),
        cache,
        cache_ttl=get_cache_config().default_ttl,
    )


# =============================================================================
# REQUEST BODIES
# =============================================================================

async def read_json_body(request: Request) -> Dict[str, Any]:
    """
    Decode a JSON object body. An empty body is an empty object.

    Raises:
        ValidationError: If the body is not valid JSON or not an object
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError("Invalid JSON body")
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


async def read_payload(
    request: Request,
    file_field: Optional[str] = None,
) -> Tuple[Dict[str, Any], List[UploadedFile]]:
    """
    Split a request into payload fields and uploaded files.

    JSON bodies carry no files. Multipart forms may carry files under
    ``file_field``; files under any other name are ignored, as are empty
    file parts browsers send when no file was picked.
    """
    content_type = request.headers.get("content-type", "")

    if not content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        return await read_json_body(request), []

    form = await request.form()
    payload: Dict[str, Any] = {}
    files: List[UploadedFile] = []

    for name, value in form.multi_items():
        if isinstance(value, UploadFile):
            if name != file_field or not value.filename:
                continue
            data = await value.read()
            if not data:
                continue
            files.append(UploadedFile(
                filename=value.filename,
                content_type=value.content_type or "application/octet-stream",
                data=data,
            ))
        else:
            payload[name] = value

    logger.debug(f"Parsed form: {sorted(payload)} fields, {len(files)} files")
    return payload, files
