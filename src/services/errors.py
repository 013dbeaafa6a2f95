"""
Service Errors

Exceptions raised by the resource services. The HTTP layer maps them to
status codes; everything else becomes a 500.
"""

from typing import Iterable


class ServiceError(Exception):
    """Base class for errors the API renders as ``{"error": message}``."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Missing or malformed input. No store mutation was attempted."""

    status_code = 400

    @classmethod
    def missing(cls, fields: Iterable[str]) -> "ValidationError":
        """Build the ``"A, B, and C are required"`` message."""
        names = list(fields)
        names[0] = _title(names[0])
        if len(names) == 1:
            text = f"{names[0]} is required"
        elif len(names) == 2:
            text = f"{names[0]} and {names[1]} are required"
        else:
            text = f"{', '.join(names[:-1])}, and {names[-1]} are required"
        return cls(text)


class NotFoundError(ServiceError):
    """Unknown identifier."""

    status_code = 404

    def __init__(self, label: str):
        super().__init__(f"{label} not found")
        self.label = label


class ExternalServiceError(ServiceError):
    """
    Cache or media host failure.

    Only ever carried inside a BestEffortResult; never reaches a client.
    """

    def __init__(self, service: str, message: str):
        super().__init__(f"{service}: {message}")
        self.service = service


def _title(field: str) -> str:
    return field[:1].upper() + field[1:]
