"""
Resource Definitions

The seven portfolio collections. LinkedIn profiles share the store and
cache layers but are served by ProfileService (single current document
with nested sections).
"""

from typing import Any, Dict, Optional

from src.database.models import (
    Certificate,
    Image,
    JourneyStep,
    LandingPage,
    OdooModule,
    PersonalProject,
)
from src.utils.coercion import coerce_bool, coerce_int, coerce_json

from .resource_service import MediaMode, ResourceDefinition


# =============================================================================
# COERCERS
# =============================================================================

def text(value: Any) -> Any:
    """Scalar text field, stored as sent."""
    return value


def json_list(value: Any) -> list:
    value = coerce_json(value)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError("expected a list")
    return value


def json_object(value: Any) -> dict:
    value = coerce_json(value)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError("expected an object")
    return value


def featured_filter(value: Any) -> Optional[bool]:
    """``?featured=true`` narrows the list; any other value is ignored."""
    return True if coerce_bool(value) else None


def _certificate_file(body: Dict[str, Any]) -> str:
    return f"{body.get('base')}.pdf"


# =============================================================================
# DEFINITIONS
# =============================================================================

CERTIFICATES = ResourceDefinition(
    name="certificates",
    label="Certificate",
    model=Certificate,
    required=("label", "type", "base"),
    fields={"label": text, "type": text, "base": text, "file": text},
    defaults={"file": _certificate_file, "media": None},
    media=MediaMode.SINGLE,
    media_field="file",
    display_field="file",
    display_source="filename",
    allow_pdf=True,
)

IMAGES = ResourceDefinition(
    name="images",
    label="Image",
    model=Image,
    required=("title", "description", "station"),
    fields={"title": text, "description": text, "station": text, "src": text},
    defaults={"src": "/default-image.jpg", "media": None},
    filters={"station": text},
    distinct_fields=("station",),
    media=MediaMode.SINGLE,
    media_field="image",
    display_field="src",
)

JOURNEY = ResourceDefinition(
    name="journey",
    label="Journey step",
    model=JourneyStep,
    required=("year", "title", "description", "icon", "color"),
    fields={
        "year": text,
        "title": text,
        "description": text,
        "icon": text,
        "color": text,
        "link": text,
        "order": coerce_int,
    },
    defaults={"order": 0},
    order=(("order", False), ("createdAt", False)),
)

LANDING_PAGES = ResourceDefinition(
    name="landing-pages",
    label="Landing page",
    model=LandingPage,
    required=("title", "description"),
    fields={
        "title": text,
        "description": text,
        "image": text,
        "liveUrl": text,
        "codeUrl": text,
        "tech": json_list,
        "color": text,
        "bgGradient": text,
        "featured": coerce_bool,
    },
    defaults={
        "featured": False,
        "image": "/api/placeholder/600/400",
        "tech": [],
        "media": None,
    },
    filters={"featured": featured_filter},
    media=MediaMode.SINGLE,
    media_field="image",
    display_field="image",
)

ODOO_MODULES = ResourceDefinition(
    name="odoo",
    label="Odoo module",
    model=OdooModule,
    required=("name", "category", "version", "description", "status"),
    fields={
        "name": text,
        "category": text,
        "version": text,
        "description": text,
        "status": text,
        "features": json_list,
        "technicalSpecs": json_object,
        "demoUrl": text,
        "codeUrl": text,
        "clientsUsing": coerce_int,
        "color": text,
        "icon": text,
        "tags": json_list,
    },
    defaults={
        "clientsUsing": 0,
        "features": [],
        "tags": [],
        "screenshots": ["/api/placeholder/800/500"],
        "media": [],
    },
    filters={"category": text, "status": text},
    distinct_fields=("category",),
    stats=True,
    media=MediaMode.MULTI,
    media_field="screenshots",
    display_field="screenshots",
)

PERSONAL_PROJECTS = ResourceDefinition(
    name="personal-info",
    label="Personal project",
    model=PersonalProject,
    required=("title", "description", "status"),
    fields={
        "title": text,
        "description": text,
        "status": text,
        "tech": json_list,
        "link": text,
        "featured": coerce_bool,
    },
    defaults={"featured": False, "tech": [], "images": [], "media": []},
    filters={"featured": featured_filter, "status": text},
    distinct_fields=("status",),
    media=MediaMode.MULTI,
    media_field="images",
    display_field="images",
)

RESOURCES = {
    definition.name: definition
    for definition in (
        CERTIFICATES,
        IMAGES,
        JOURNEY,
        LANDING_PAGES,
        ODOO_MODULES,
        PERSONAL_PROJECTS,
    )
}
