"""
SQLAlchemy Models for the Portfolio CMS

Every resource type is a document collection: one table per collection,
one row per document. The document body lives in a JSON column so resource
shapes can evolve without migrations; only the identifier and the store-set
timestamps are real columns.
"""

from datetime import datetime
from typing import Any, Dict
from uuid import uuid4

from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# JSONB on PostgreSQL, plain JSON (TEXT) on SQLite
DocumentJSON = JSON().with_variant(JSONB(), "postgresql")


def generate_id() -> str:
    return uuid4().hex


class Document(Base):
    """Shared columns of every collection."""
    __abstract__ = True

    id = Column(String(32), primary_key=True, default=generate_id)
    data = Column(DocumentJSON, nullable=False, default=dict)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation: payload fields plus id and timestamps."""
        body = dict(self.data or {})
        body["id"] = self.id
        body["createdAt"] = self.created_at.isoformat() if self.created_at else None
        body["updatedAt"] = self.updated_at.isoformat() if self.updated_at else None
        return body

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id}>"


# =============================================================================
# COLLECTIONS
# =============================================================================

class Certificate(Document):
    """Certificates and diplomas (PDF or image)"""
    __tablename__ = "certificates"


class Image(Document):
    """Gallery images grouped by station"""
    __tablename__ = "images"


class JourneyStep(Document):
    """Timeline entries, explicitly ordered"""
    __tablename__ = "journey_steps"


class LandingPage(Document):
    """Landing page showcase"""
    __tablename__ = "landing_pages"


class LinkedinProfile(Document):
    """LinkedIn-style profile; the newest document is the current profile"""
    __tablename__ = "linkedin_profiles"


class OdooModule(Document):
    """Odoo module showcase"""
    __tablename__ = "odoo_modules"


class PersonalProject(Document):
    """Personal projects"""
    __tablename__ = "personal_projects"
