"""
Cache Serialization

Cached values are pre-serialized response bodies (lists of entity dicts,
distinct values, stats). JSON keeps them readable from redis-cli.
"""

import json
from typing import Any


def serialize_value(value: Any) -> bytes:
    """
    Serialize a Python value to bytes for caching.

    Uses JSON with default handler for non-serializable types.
    """
    def default_handler(obj):
        if hasattr(obj, 'isoformat'):
            return obj.isoformat()
        if hasattr(obj, '__dict__'):
            return obj.__dict__
        return str(obj)

    json_str = json.dumps(value, default=default_handler, ensure_ascii=False)
    return json_str.encode('utf-8')


def deserialize_value(data: bytes) -> Any:
    """
    Deserialize bytes back to Python value.
    """
    if not data:
        return None
    if isinstance(data, str):
        return json.loads(data)
    return json.loads(data.decode('utf-8'))
