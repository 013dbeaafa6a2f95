"""
Cache Configuration

Centralized configuration for the Redis list cache.

Every list view is cached for CACHE_TTL seconds (default one hour). Writes
invalidate explicitly, so the TTL only bounds staleness when an
invalidation is lost (e.g. a crash between the store write and the delete).
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache


@dataclass
class CacheConfig:
    """
    Main cache configuration.

    Settings can be overridden via environment variables:
    - REDIS_URL: Redis connection string
    - CACHE_ENABLED: Enable/disable caching globally
    - CACHE_TTL: Default entry lifetime in seconds
    - CACHE_NAMESPACE: Prefix for every key
    """

    redis_url: str = field(default_factory=lambda: os.getenv(
        "REDIS_URL",
        "redis://localhost:6379"
    ))

    # Cache namespace (for key prefixes)
    namespace: str = field(default_factory=lambda: os.getenv(
        "CACHE_NAMESPACE",
        "portfolio"
    ))

    # Global cache toggle
    enabled: bool = field(default_factory=lambda: os.getenv(
        "CACHE_ENABLED",
        "true"
    ).lower() == "true")

    default_ttl: int = field(default_factory=lambda: int(os.getenv(
        "CACHE_TTL",
        "3600"
    )))

    # Connection settings
    redis_max_connections: int = 10
    redis_socket_timeout: float = 2.0
    redis_connect_timeout: float = 2.0

    # Circuit breaker: stop calling Redis after repeated failures
    circuit_breaker_enabled: bool = True
    circuit_breaker_threshold: int = 5
    circuit_breaker_timeout: int = 30


@lru_cache(maxsize=1)
def get_cache_config() -> CacheConfig:
    """Get singleton cache configuration."""
    return CacheConfig()
