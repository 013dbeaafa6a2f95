"""
Generic Resource Service

Every portfolio resource follows the same pattern, so one service class is
parameterised by a ResourceDefinition instead of seven near-identical
handler modules.

Read path:
    normalise filter -> derive cache key -> cache.get -> store query
    -> cache.set -> return

Write path:
    presence check -> merge fields -> upload media -> store write
    -> invalidate every view of the resource -> best-effort media cleanup

The store write is authoritative. Cache invalidation and media deletes run
through best_effort() and never abort it.
"""

import copy
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Type

from src.cache.base import CacheBackend
from src.cache.invalidation import CacheEvent, CacheInvalidator
from src.cache.keys import CacheKeys
from src.database.models import Document
from src.database.repository import DocumentRepository, NEWEST_FIRST, OrderSpec
from src.media.storage import (
    IMAGE_CONTENT_PREFIX,
    PDF_CONTENT_TYPE,
    MediaReference,
    MediaStorage,
)
from src.utils.coercion import coerce_int, is_blank

from .best_effort import best_effort
from .errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# Coercers turn a raw body/query value into its stored form. They raise
# ValueError for malformed input; filter coercers may return None to drop
# the filter.
Coercer = Callable[[Any], Any]


class MediaMode(Enum):
    NONE = "none"
    SINGLE = "single"
    MULTI = "multi"


@dataclass
class UploadedFile:
    """A file received in a multipart request."""
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class ResourceDefinition:
    """
    Everything that distinguishes one resource type from another.

    Attributes:
        name: Cache key prefix (also the media folder)
        label: Human-readable singular used in messages
        model: Collection table
        required: Fields that must be non-blank on create, in message order
        fields: Writable fields and their coercers
        defaults: Values applied on create; callables receive the body
        order: Default list ordering
        filters: Query parameters accepted by list()
        distinct_fields: Fields exposed through distinct()
        stats: Whether the resource has an aggregate stats view
        media: Media cardinality
        media_field: Multipart form field carrying the files
        display_field: Field mirroring the uploaded media for clients
        display_source: "url" or "filename" for what display_field holds
        allow_pdf: Accept application/pdf in addition to images
    """
    name: str
    label: str
    model: Type[Document]
    required: Sequence[str] = ()
    fields: Dict[str, Coercer] = field(default_factory=dict)
    defaults: Dict[str, Any] = field(default_factory=dict)
    order: OrderSpec = NEWEST_FIRST
    filters: Dict[str, Coercer] = field(default_factory=dict)
    distinct_fields: Sequence[str] = ()
    stats: bool = False
    media: MediaMode = MediaMode.NONE
    media_field: Optional[str] = None
    display_field: Optional[str] = None
    display_source: str = "url"
    allow_pdf: bool = False

    @property
    def keys(self) -> CacheKeys:
        return CacheKeys(self.name)

    @property
    def named_views(self) -> List[str]:
        return ["stats"] if self.stats else []


class ResourceService:
    """
    Cache-coherent CRUD for one resource type.

    Args:
        definition: Resource shape and policies
        repository: Store access for the definition's collection
        cache: Cache backend (fail-open)
        media: Media host for resources with uploads
        max_upload_bytes: Per-file size limit
        max_files: Per-request file count limit for multi-media resources
        cache_ttl: TTL for list views; None uses the backend default
    """

    def __init__(
        self,
        definition: ResourceDefinition,
        repository: DocumentRepository,
        cache: CacheBackend,
        media: Optional[MediaStorage] = None,
        max_upload_bytes: int = 10 * 1024 * 1024,
        max_files: int = 5,
        cache_ttl: Optional[int] = None,
    ):
        self.definition = definition
        self.repository = repository
        self.cache = cache
        self.media = media
        self.max_upload_bytes = max_upload_bytes
        self.max_files = max_files
        self.cache_ttl = cache_ttl
        self.keys = definition.keys
        self.invalidator = CacheInvalidator(
            cache,
            self.keys,
            distinct_fields=definition.distinct_fields,
            named_views=definition.named_views,
        )

    # =========================================================================
    # Reads
    # =========================================================================

    def normalize_filters(self, query: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Keep known, non-blank filters in their stored types."""
        filters = {}
        for name, coercer in self.definition.filters.items():
            raw = (query or {}).get(name)
            if is_blank(raw):
                continue
            try:
                value = coercer(raw)
            except ValueError:
                continue
            if value is not None:
                filters[name] = value
        return filters

    async def list(self, query: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        filters = self.normalize_filters(query)
        key = self.keys.for_filters(filters)

        cached = await self.cache.get(key)
        if cached is not None:
            return cached

        result = [
            doc.to_dict()
            for doc in self.repository.find(filters, order=self.definition.order)
        ]
        await self.cache.set(key, result, self.cache_ttl)
        return result

    async def get(self, doc_id: str) -> Dict[str, Any]:
        return self._require(doc_id).to_dict()

    async def distinct(self, field_name: str) -> List[Any]:
        if field_name not in self.definition.distinct_fields:
            raise ValueError(f"{self.definition.name} has no distinct view for {field_name}")

        key = self.keys.distinct(field_name)
        cached = await self.cache.get(key)
        if cached is not None:
            return cached

        values = self.repository.distinct(field_name)
        await self.cache.set(key, values, self.cache_ttl)
        return values

    async def stats(self) -> Dict[str, Any]:
        """Module aggregates: totals, per-category and per-status counts, clients."""
        key = self.keys.named("stats")
        cached = await self.cache.get(key)
        if cached is not None:
            return cached

        result = {
            "totalModules": self.repository.count(),
            "modulesByCategory": self.repository.group_count("category"),
            "modulesByStatus": self.repository.group_count("status"),
            "totalClients": self.repository.sum("clientsUsing"),
        }
        await self.cache.set(key, result, self.cache_ttl)
        return result

    # =========================================================================
    # Writes
    # =========================================================================

    async def create(
        self,
        payload: Dict[str, Any],
        files: Sequence[UploadedFile] = (),
    ) -> Dict[str, Any]:
        missing = [name for name in self.definition.required if is_blank(payload.get(name))]
        if missing:
            raise ValidationError.missing(self.definition.required)

        provided = self._coerce(payload)
        self._validate_files(files)

        body = {}
        for name, default in self.definition.defaults.items():
            if callable(default):
                continue
            body[name] = copy.deepcopy(default)
        body.update(provided)
        for name, default in self.definition.defaults.items():
            if callable(default) and name not in provided:
                body[name] = default(body)

        uploaded = await self._upload_all(files)
        if uploaded:
            self._attach_media(body, uploaded)

        doc = self.repository.insert(body)
        await self._invalidate(CacheEvent.CREATED, doc.id)
        logger.info(f"Created {self.definition.name}/{doc.id}")
        return doc.to_dict()

    async def update(
        self,
        doc_id: str,
        payload: Dict[str, Any],
        files: Sequence[UploadedFile] = (),
    ) -> Dict[str, Any]:
        doc = self._require(doc_id)
        provided = self._coerce(payload)
        self._validate_files(files)

        body = dict(doc.data or {})
        body.update(provided)

        uploaded = await self._upload_all(files)
        if uploaded:
            await self._delete_media(self._media_refs(body), "replaced")
            self._attach_media(body, uploaded)

        doc = self.repository.save(doc, body)
        await self._invalidate(CacheEvent.UPDATED, doc.id)
        return doc.to_dict()

    async def delete(self, doc_id: str) -> Dict[str, str]:
        doc = self._require(doc_id)

        await self._delete_media(self._media_refs(doc.data or {}), "deleted")
        self.repository.delete(doc)
        await self._invalidate(CacheEvent.DELETED, doc_id)

        logger.info(f"Deleted {self.definition.name}/{doc_id}")
        return {"message": f"{self.definition.label} deleted successfully"}

    async def set_field(self, doc_id: str, field_name: str, value: Any) -> Dict[str, Any]:
        """Overwrite one field, coerced like a regular update."""
        doc = self._require(doc_id)
        coercer = self.definition.fields.get(field_name, _identity)
        try:
            value = coercer(value)
        except ValueError as e:
            raise ValidationError(f"Invalid value for {field_name}: {e}")

        doc = self.repository.set_field(doc, field_name, value)
        await self._invalidate(CacheEvent.UPDATED, doc.id)
        return doc.to_dict()

    async def toggle_featured(self, doc_id: str) -> Dict[str, Any]:
        doc = self._require(doc_id)
        featured = not bool((doc.data or {}).get("featured", False))

        doc = self.repository.set_field(doc, "featured", featured)
        await self._invalidate(CacheEvent.FEATURE_TOGGLED, doc.id)
        return doc.to_dict()

    async def reorder(self, steps: Any) -> List[Dict[str, Any]]:
        """
        Apply ``[{id, order}]`` and return the full list in display order.

        Unknown ids are skipped.
        """
        if not isinstance(steps, list):
            raise ValidationError("Steps array is required")

        for step in steps:
            if not isinstance(step, dict):
                continue
            doc = self.repository.get(step.get("id") or step.get("_id"))
            if doc is None:
                logger.debug(f"Reorder skipped unknown {self.definition.name} id {step.get('id')}")
                continue
            self.repository.set_field(doc, "order", coerce_int(step.get("order")))

        await self._invalidate(CacheEvent.REORDERED)
        return [doc.to_dict() for doc in self.repository.find(order=self.definition.order)]

    # =========================================================================
    # Helpers
    # =========================================================================

    def _require(self, doc_id: str) -> Document:
        doc = self.repository.get(doc_id)
        if doc is None:
            raise NotFoundError(self.definition.label)
        return doc

    def _coerce(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Writable fields present in the payload, coerced. Unknown keys are ignored."""
        values = {}
        for name, coercer in self.definition.fields.items():
            if name not in payload:
                continue
            try:
                values[name] = coercer(payload[name])
            except ValueError as e:
                raise ValidationError(f"Invalid value for {name}: {e}")
        return values

    def _validate_files(self, files: Sequence[UploadedFile]) -> None:
        if not files:
            return
        if self.definition.media is MediaMode.NONE or self.media is None:
            raise ValidationError(f"{self.definition.label} does not accept file uploads")

        limit = 1 if self.definition.media is MediaMode.SINGLE else self.max_files
        if len(files) > limit:
            raise ValidationError(f"Too many files: at most {limit} allowed")

        for upload in files:
            content_type = (upload.content_type or "").lower()
            allowed = content_type.startswith(IMAGE_CONTENT_PREFIX) or (
                self.definition.allow_pdf and content_type == PDF_CONTENT_TYPE
            )
            if not allowed:
                if self.definition.allow_pdf:
                    raise ValidationError("Only image or PDF files are allowed")
                raise ValidationError("Only image files are allowed")
            if upload.size > self.max_upload_bytes:
                raise ValidationError(
                    f"File {upload.filename} exceeds the {self.max_upload_bytes // (1024 * 1024)}MB limit"
                )

    async def _upload_all(self, files: Sequence[UploadedFile]) -> List[tuple]:
        """
        Upload each file independently.

        A failed upload is logged and skipped; the others still attach.
        Returns ``(file, reference)`` pairs for the successful uploads.
        """
        uploaded = []
        for upload in files:
            result = await best_effort(
                f"upload of {upload.filename} for {self.definition.name}",
                self.media.upload(
                    upload.data,
                    upload.filename,
                    upload.content_type,
                    folder=self.definition.name,
                ),
                service="media",
            )
            if result.ok:
                uploaded.append((upload, result.value))
        if files and not uploaded:
            logger.warning(f"No uploads succeeded for {self.definition.name}; keeping existing media")
        return uploaded

    def _attach_media(self, body: Dict[str, Any], uploaded: List[tuple]) -> None:
        display = self.definition.display_field

        if self.definition.media is MediaMode.SINGLE:
            upload, ref = uploaded[0]
            body["media"] = ref.to_dict()
            if display:
                body[display] = upload.filename if self.definition.display_source == "filename" else ref.url
        else:
            body["media"] = [ref.to_dict() for _, ref in uploaded]
            if display:
                body[display] = [ref.url for _, ref in uploaded]

    def _media_refs(self, body: Dict[str, Any]) -> List[MediaReference]:
        stored = body.get("media")
        if isinstance(stored, list):
            refs = [MediaReference.from_dict(item) for item in stored]
        else:
            refs = [MediaReference.from_dict(stored)]
        return [ref for ref in refs if ref is not None]

    async def _delete_media(self, refs: List[MediaReference], reason: str) -> None:
        """Exactly one delete per reference; failures leave orphans."""
        if not refs or self.media is None:
            return
        for ref in refs:
            await best_effort(
                f"delete of {reason} media {ref.external_id}",
                self.media.delete(ref.external_id),
                service="media",
            )

    async def _invalidate(self, event: CacheEvent, entity_id: Optional[str] = None) -> None:
        await best_effort(
            f"cache invalidation for {self.definition.name}",
            self.invalidator.handle_event(event, entity_id=entity_id),
            service="cache",
        )


def _identity(value: Any) -> Any:
    return value
