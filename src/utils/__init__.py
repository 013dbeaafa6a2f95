"""Utility modules for the Portfolio CMS API."""

from .config import Settings, get_settings
from .coercion import (
    coerce_bool,
    coerce_int,
    coerce_json,
    is_blank,
)

__all__ = [
    "Settings",
    "get_settings",
    # Form value coercion
    "coerce_bool",
    "coerce_int",
    "coerce_json",
    "is_blank",
]
