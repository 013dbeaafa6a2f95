"""
Document store.

One SQLAlchemy table per collection, JSON document bodies.
"""

from .models import (
    Base,
    Document,
    Certificate,
    Image,
    JourneyStep,
    LandingPage,
    LinkedinProfile,
    OdooModule,
    PersonalProject,
    generate_id,
)
from .session import (
    get_database_url,
    create_db_engine,
    get_engine,
    get_session_factory,
    get_db,
    init_db,
)
from .repository import DocumentRepository, NEWEST_FIRST, RESERVED_FIELDS, strip_reserved

__all__ = [
    "Base",
    "Document",
    "Certificate",
    "Image",
    "JourneyStep",
    "LandingPage",
    "LinkedinProfile",
    "OdooModule",
    "PersonalProject",
    "generate_id",
    "get_database_url",
    "create_db_engine",
    "get_engine",
    "get_session_factory",
    "get_db",
    "init_db",
    "DocumentRepository",
    "NEWEST_FIRST",
    "RESERVED_FIELDS",
    "strip_reserved",
]
