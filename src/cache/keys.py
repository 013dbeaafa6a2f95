"""
Cache Key Derivation

Keys are computed per request from the resource type and the normalized
query filter; they are never stored alongside the entities.

Layout (before the namespace prefix added by the backend):
    <resource>:all                        unfiltered list
    <resource>:filter:<k>=<v>&<k>=<v>     filtered list, filters sorted by name
    <resource>:distinct:<field>           distinct values of one field
    <resource>:<name>                     named views (stats, profile)
"""

from typing import Any, Dict, Iterable, List, Optional


class CacheKeys:
    """Key builder for one resource type."""

    def __init__(self, resource: str):
        self.resource = resource

    def all(self) -> str:
        return f"{self.resource}:all"

    def for_filters(self, filters: Optional[Dict[str, Any]] = None) -> str:
        """
        Key for a list view.

        Equal filter dicts always map to the same key regardless of insertion
        order; an empty filter is the "all" view.
        """
        if not filters:
            return self.all()
        parts = [f"{name}={_key_value(filters[name])}" for name in sorted(filters)]
        return f"{self.resource}:filter:{'&'.join(parts)}"

    def distinct(self, field: str) -> str:
        return f"{self.resource}:distinct:{field}"

    def named(self, name: str) -> str:
        return f"{self.resource}:{name}"

    def filter_pattern(self) -> str:
        """Glob matching every filtered list view of this resource."""
        return f"{self.resource}:filter:*"

    def enumerated(
        self,
        distinct_fields: Iterable[str] = (),
        named_views: Iterable[str] = (),
    ) -> List[str]:
        """Every statically known key of this resource."""
        keys = [self.all()]
        keys.extend(self.distinct(f) for f in distinct_fields)
        keys.extend(self.named(n) for n in named_views)
        return keys


def _key_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
