"""
Portfolio Caching Layer

Read-through Redis cache for public list views:
- RedisCache: fail-open get/set/delete/delete_pattern with a circuit breaker
- CacheKeys: deterministic key derivation from resource type + filter
- CacheInvalidator: clears every view of a resource after a mutation

A cache outage never surfaces as an error: reads fall back to the store and
writes/invalidation are logged and dropped. Staleness after a lost
invalidation is bounded by CACHE_TTL.

Usage:
    cache = await get_redis_cache()
    keys = CacheKeys("images")
    cached = await cache.get(keys.for_filters({"station": "lab"}))

    invalidator = CacheInvalidator(cache, keys, distinct_fields=["station"])
    await invalidator.handle_event(CacheEvent.UPDATED, entity_id=image_id)
"""

from src.cache.base import CacheBackend
from src.cache.config import CacheConfig, get_cache_config
from src.cache.redis_cache import RedisCache, get_redis_cache, close_redis_cache
from src.cache.keys import CacheKeys
from src.cache.invalidation import (
    CacheInvalidator,
    CacheEvent,
    InvalidationResult,
)
from src.cache.serialization import serialize_value, deserialize_value

__all__ = [
    # Contract
    "CacheBackend",
    # Config
    "CacheConfig",
    "get_cache_config",
    # Redis
    "RedisCache",
    "get_redis_cache",
    "close_redis_cache",
    # Keys
    "CacheKeys",
    # Invalidation
    "CacheInvalidator",
    "CacheEvent",
    "InvalidationResult",
    # Serialization
    "serialize_value",
    "deserialize_value",
]
