"""Certificates API: /api/certificates"""

from src.services.resources import CERTIFICATES

from api.resources import create_resource_router

router = create_resource_router(CERTIFICATES, "/api/certificates", ["Certificates"])
