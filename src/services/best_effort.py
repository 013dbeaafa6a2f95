"""
Best-effort sub-operations.

Media cleanup and cache invalidation must never abort the store mutation
they follow. They run through best_effort(), which converts any exception
into a logged BestEffortResult the caller is free to ignore.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Optional

from .errors import ExternalServiceError

logger = logging.getLogger(__name__)


@dataclass
class BestEffortResult:
    """Outcome of a best-effort operation."""
    operation: str
    ok: bool
    value: Any = None
    error: Optional[ExternalServiceError] = None


async def best_effort(operation: str, awaitable: Awaitable, service: str = "external") -> BestEffortResult:
    """
    Await ``awaitable`` and capture its outcome.

    Args:
        operation: Human-readable name used in the log line
        awaitable: Coroutine to run
        service: Collaborator name recorded on the error (cache, media)
    """
    try:
        value = await awaitable
        return BestEffortResult(operation=operation, ok=True, value=value)
    except Exception as e:
        logger.warning(f"Best-effort {operation} failed: {e}")
        return BestEffortResult(
            operation=operation,
            ok=False,
            error=ExternalServiceError(service, str(e)),
        )
