"""
LinkedIn Profile Service

The profile collection holds a single logical document: the most recently
created profile is the current one. Its list sections (experience,
education, ...) are edited item by item; every item carries its own id.
"""

import logging
from typing import Any, Dict, List, Optional

from src.cache.base import CacheBackend
from src.cache.invalidation import CacheEvent, CacheInvalidator
from src.cache.keys import CacheKeys
from src.database.models import Document, generate_id
from src.database.repository import DocumentRepository

from .best_effort import best_effort
from .errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

CACHE_RESOURCE = "linkedin"
PROFILE_VIEW = "profile"

# Section name -> label used in "<Label> not found"
SECTIONS = {
    "experience": "Experience",
    "education": "Education",
    "skills": "Skill",
    "certifications": "Certification",
    "recommendations": "Recommendation",
}

LIST_FIELDS = tuple(SECTIONS) + ("achievements",)
WRITABLE_FIELDS = ("profile",) + LIST_FIELDS


class ProfileService:
    """Current-profile reads and section edits for the LinkedIn profile."""

    def __init__(
        self,
        repository: DocumentRepository,
        cache: CacheBackend,
        cache_ttl: Optional[int] = None,
    ):
        self.repository = repository
        self.cache = cache
        self.cache_ttl = cache_ttl
        self.keys = CacheKeys(CACHE_RESOURCE)
        self.invalidator = CacheInvalidator(cache, self.keys, named_views=[PROFILE_VIEW])

    # =========================================================================
    # Whole profile
    # =========================================================================

    async def get_current(self) -> Dict[str, Any]:
        key = self.keys.named(PROFILE_VIEW)
        cached = await self.cache.get(key)
        if cached is not None:
            return cached

        doc = self.repository.first()
        if doc is None:
            raise NotFoundError("LinkedIn profile")

        result = doc.to_dict()
        await self.cache.set(key, result, self.cache_ttl)
        return result

    async def upsert(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Merge into the current profile, or create the first one."""
        changes = self._writable(payload)
        doc = self.repository.first()

        if doc is None:
            body = {name: [] for name in LIST_FIELDS}
            body["profile"] = {}
            body.update(changes)
            doc = self.repository.insert(body)
            event = CacheEvent.CREATED
            logger.info(f"Created LinkedIn profile {doc.id}")
        else:
            body = dict(doc.data or {})
            body.update(changes)
            doc = self.repository.save(doc, body)
            event = CacheEvent.UPDATED

        await self._invalidate(event, doc.id)
        return doc.to_dict()

    async def update(self, profile_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        doc = self._require(profile_id)
        body = dict(doc.data or {})
        body.update(self._writable(payload))

        doc = self.repository.save(doc, body)
        await self._invalidate(CacheEvent.UPDATED, doc.id)
        return doc.to_dict()

    async def delete(self, profile_id: str) -> Dict[str, str]:
        doc = self._require(profile_id)
        self.repository.delete(doc)
        await self._invalidate(CacheEvent.DELETED, profile_id)
        return {"message": "LinkedIn profile deleted successfully"}

    # =========================================================================
    # Section items
    # =========================================================================

    async def add_item(self, profile_id: str, section: str, item: Dict[str, Any]) -> Dict[str, Any]:
        self._check_section(section)
        if not isinstance(item, dict):
            raise ValidationError(f"{SECTIONS[section]} must be an object")

        doc = self._require(profile_id)
        body = dict(doc.data or {})
        items = list(body.get(section) or [])
        items.append(_with_id(item))
        body[section] = items

        doc = self.repository.save(doc, body)
        await self._invalidate(CacheEvent.ITEM_ADDED, doc.id)
        return doc.to_dict()

    async def update_item(
        self,
        profile_id: str,
        section: str,
        item_id: str,
        changes: Dict[str, Any],
    ) -> Dict[str, Any]:
        self._check_section(section)
        doc = self._require(profile_id)
        body = dict(doc.data or {})
        items = list(body.get(section) or [])

        index = _find_item(items, item_id)
        if index is None:
            raise NotFoundError(SECTIONS[section])

        updated = dict(items[index])
        updated.update({k: v for k, v in (changes or {}).items() if k not in ("id", "_id")})
        items[index] = updated
        body[section] = items

        doc = self.repository.save(doc, body)
        await self._invalidate(CacheEvent.ITEM_UPDATED, doc.id)
        return doc.to_dict()

    async def remove_item(self, profile_id: str, section: str, item_id: str) -> Dict[str, Any]:
        self._check_section(section)
        doc = self._require(profile_id)
        body = dict(doc.data or {})
        items = list(body.get(section) or [])

        index = _find_item(items, item_id)
        if index is None:
            raise NotFoundError(SECTIONS[section])

        del items[index]
        body[section] = items

        doc = self.repository.save(doc, body)
        await self._invalidate(CacheEvent.ITEM_REMOVED, doc.id)
        return doc.to_dict()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _require(self, profile_id: str) -> Document:
        doc = self.repository.get(profile_id)
        if doc is None:
            raise NotFoundError("Profile")
        return doc

    def _check_section(self, section: str) -> None:
        if section not in SECTIONS:
            raise NotFoundError(f"Section {section}")

    def _writable(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Known fields only; list items get ids."""
        if not isinstance(payload, dict):
            raise ValidationError("Profile body must be an object")

        changes = {}
        for name in WRITABLE_FIELDS:
            if name not in payload:
                continue
            value = payload[name]
            if name == "profile":
                if value is not None and not isinstance(value, dict):
                    raise ValidationError("profile must be an object")
                changes[name] = value or {}
            else:
                if value is not None and not isinstance(value, list):
                    raise ValidationError(f"{name} must be a list")
                changes[name] = [
                    _with_id(item) if name in SECTIONS and isinstance(item, dict) else item
                    for item in (value or [])
                ]
        return changes

    async def _invalidate(self, event: CacheEvent, entity_id: Optional[str] = None) -> None:
        await best_effort(
            "cache invalidation for linkedin",
            self.invalidator.handle_event(event, entity_id=entity_id),
            service="cache",
        )


def _with_id(item: Dict[str, Any]) -> Dict[str, Any]:
    item = dict(item)
    if not item.get("id"):
        item["id"] = item.pop("_id", None) or generate_id()
    return item


def _find_item(items: List[Any], item_id: str) -> Optional[int]:
    for index, item in enumerate(items):
        if isinstance(item, dict) and item.get("id") == item_id:
            return index
    return None
