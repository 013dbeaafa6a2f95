"""
Form value coercion.

Multipart forms deliver every field as a string, JSON bodies deliver real
types. These helpers accept both so a resource field is stored the same way
regardless of how the client sent it.
"""

import json
from typing import Any


def is_blank(value: Any) -> bool:
    """True for values that count as "not provided" in a presence check."""
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def coerce_bool(value: Any) -> bool:
    """
    Interpret a form or JSON value as a boolean.

    Only ``True`` and the string ``"true"`` (any case) are truthy; everything
    else, including ``"1"`` and ``"yes"``, is False.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


def coerce_int(value: Any, default: int = 0) -> int:
    """
    Lenient integer parse.

    Accepts ints, floats and numeric strings with trailing garbage
    ("12abc" -> 12). Anything unparseable yields ``default``.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        sign = 1
        if text[:1] in ("-", "+"):
            sign = -1 if text[0] == "-" else 1
            text = text[1:]
        digits = ""
        for ch in text:
            if not ch.isdigit():
                break
            digits += ch
        if digits:
            return sign * int(digits)
    return default


def coerce_json(value: Any) -> Any:
    """
    Decode list/object fields that arrive as JSON strings.

    Raises:
        ValueError: If ``value`` is a string that is not valid JSON
    """
    if isinstance(value, str):
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON value: {e.msg}")
    return value
