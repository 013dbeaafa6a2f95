"""
Landing Pages API: /api/landing-pages

``?featured=true`` lists featured pages only.
"""

from src.services.resources import LANDING_PAGES

from api.resources import add_toggle_featured, create_resource_router

router = create_resource_router(
    LANDING_PAGES,
    "/api/landing-pages",
    ["Landing Pages"],
    add_toggle_featured,
)
