"""
Cache Invalidation Service

Event-driven invalidation of list views after a mutation.

Principle: over-invalidating is safe, under-invalidating is not. Filtered
views are keyed by query parameters, so the set of keys one mutation can
affect is not known statically; those are cleared with a pattern delete
while the statically known keys (all, distinct, named views) are deleted
one by one.
"""

import logging
from enum import Enum
from typing import Iterable, List, Optional
from dataclasses import dataclass, field
from datetime import datetime

from src.cache.base import CacheBackend
from src.cache.keys import CacheKeys


logger = logging.getLogger(__name__)


class CacheEvent(Enum):
    """Mutations that trigger cache invalidation."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    REORDERED = "reordered"
    FEATURE_TOGGLED = "feature_toggled"
    ITEM_ADDED = "item_added"
    ITEM_UPDATED = "item_updated"
    ITEM_REMOVED = "item_removed"


@dataclass
class InvalidationResult:
    """Result of a cache invalidation operation."""
    resource: str
    event: CacheEvent
    success: bool
    keys_invalidated: int
    duration_ms: float
    errors: List[str] = field(default_factory=list)


class CacheInvalidator:
    """
    Handles cache invalidation for one resource type.

    Every event clears the same scope: a write to a resource can change any
    of its list, distinct and aggregate views.
    """

    def __init__(
        self,
        cache: CacheBackend,
        keys: CacheKeys,
        distinct_fields: Iterable[str] = (),
        named_views: Iterable[str] = (),
    ):
        self._cache = cache
        self._keys = keys
        self._distinct_fields = tuple(distinct_fields)
        self._named_views = tuple(named_views)

    @property
    def enumerated_keys(self) -> List[str]:
        return self._keys.enumerated(self._distinct_fields, self._named_views)

    async def handle_event(
        self,
        event: CacheEvent,
        entity_id: Optional[str] = None,
    ) -> InvalidationResult:
        """
        Invalidate every view of the resource.

        Never raises; failures are reported in the result.
        """
        start_time = datetime.utcnow()
        errors = []
        keys_invalidated = 0

        try:
            for key in self.enumerated_keys:
                if await self._cache.delete(key):
                    keys_invalidated += 1
                else:
                    errors.append(f"delete failed: {key}")

            keys_invalidated += await self._cache.delete_pattern(self._keys.filter_pattern())

        except Exception as e:
            errors.append(str(e))
            logger.error(f"Cache invalidation error for {self._keys.resource}: {e}")

        duration = (datetime.utcnow() - start_time).total_seconds() * 1000

        result = InvalidationResult(
            resource=self._keys.resource,
            event=event,
            success=len(errors) == 0,
            keys_invalidated=keys_invalidated,
            duration_ms=duration,
            errors=errors,
        )

        logger.debug(
            f"Invalidation {self._keys.resource}/{event.value} "
            f"(id={entity_id}): {keys_invalidated} keys, {duration:.2f}ms"
        )
        if errors:
            logger.warning(
                f"Cache invalidation for {self._keys.resource} incomplete: {errors}"
            )

        return result
