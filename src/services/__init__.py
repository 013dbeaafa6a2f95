"""
Portfolio Services Layer

Business logic that orchestrates the store, the cache and the media host
for each resource type.
"""

from .errors import ServiceError, ValidationError, NotFoundError, ExternalServiceError
from .best_effort import BestEffortResult, best_effort
from .resource_service import (
    MediaMode,
    ResourceDefinition,
    ResourceService,
    UploadedFile,
)
from .resources import (
    CERTIFICATES,
    IMAGES,
    JOURNEY,
    LANDING_PAGES,
    ODOO_MODULES,
    PERSONAL_PROJECTS,
    RESOURCES,
)
from .profile_service import ProfileService, SECTIONS

__all__ = [
    # Errors
    "ServiceError",
    "ValidationError",
    "NotFoundError",
    "ExternalServiceError",
    # Best effort
    "BestEffortResult",
    "best_effort",
    # Generic service
    "MediaMode",
    "ResourceDefinition",
    "ResourceService",
    "UploadedFile",
    # Definitions
    "CERTIFICATES",
    "IMAGES",
    "JOURNEY",
    "LANDING_PAGES",
    "ODOO_MODULES",
    "PERSONAL_PROJECTS",
    "RESOURCES",
    # LinkedIn
    "ProfileService",
    "SECTIONS",
]
