"""
Cache Backend Contract

Every method is best-effort: a cache outage must degrade to direct store
reads, never to an error response. Implementations swallow their own
connectivity failures and report them through return values.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class CacheBackend(ABC):
    """Abstract base class for cache backends."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None on a miss or any failure."""
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Store a value for ``ttl`` seconds. Returns False on failure."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove one key. Returns False on failure."""
        pass

    @abstractmethod
    async def delete_pattern(self, pattern: str) -> int:
        """Remove every key matching a glob pattern. Returns count deleted."""
        pass

    async def health_check(self) -> dict:
        """Report backend status for the health endpoint."""
        return {"healthy": True, "status": "unknown"}
