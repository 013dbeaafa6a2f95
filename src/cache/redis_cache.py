"""
Redis Cache Implementation

Read-through cache for list views. Every public method is fail-open: a
disabled, unreachable or misbehaving Redis turns reads into misses and
writes into no-ops, so the API keeps serving straight from the store.

Keys given to the public methods are logical (``"images:all"``); the
CACHE_NAMESPACE prefix is added here.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from redis.asyncio import Redis, ConnectionPool
from redis.exceptions import RedisError

from src.cache.base import CacheBackend
from src.cache.config import CacheConfig, get_cache_config
from src.cache.serialization import serialize_value, deserialize_value


logger = logging.getLogger(__name__)


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    errors: int = 0

    @property
    def hit_rate(self) -> float:
        lookups = self.hits + self.misses
        return self.hits / lookups if lookups else 0.0


@dataclass
class CircuitBreakerState:
    failures: int = 0
    is_open: bool = False
    opened_at: float = 0.0


class CircuitBreaker:
    """
    Stops calling Redis after ``threshold`` consecutive failures.

    While open, every cache call is an immediate miss instead of a socket
    timeout. After ``timeout`` seconds the breaker closes again and the next
    call tries Redis.
    """

    def __init__(self, threshold: int = 5, timeout: int = 30):
        self.threshold = threshold
        self.timeout = timeout
        self.state = CircuitBreakerState()
        self._lock = asyncio.Lock()

    async def is_available(self) -> bool:
        if not self.state.is_open:
            return True
        if time.time() - self.state.opened_at < self.timeout:
            return False

        async with self._lock:
            self.state = CircuitBreakerState()
        logger.info("Cache circuit breaker closed, retrying Redis")
        return True

    async def record_success(self):
        if self.state.failures or self.state.is_open:
            async with self._lock:
                self.state = CircuitBreakerState()

    async def record_failure(self):
        async with self._lock:
            self.state.failures += 1
            if not self.state.is_open and self.state.failures >= self.threshold:
                self.state.is_open = True
                self.state.opened_at = time.time()
                logger.warning(
                    f"Cache circuit breaker opened after {self.state.failures} failures, "
                    f"serving from the store for {self.timeout}s"
                )


class RedisCache(CacheBackend):
    """
    Redis backend for the list cache.

    Args:
        config: Cache settings (defaults to the environment)
        redis: Pre-built client; skips the lazy connection
    """

    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        redis: Optional[Redis] = None,
    ):
        self.config = config or get_cache_config()
        self._pool: Optional[ConnectionPool] = None
        self._redis: Optional[Redis] = redis
        self._connected = redis is not None
        self._connect_lock = asyncio.Lock()
        self._stats = CacheStats()
        self._breaker = CircuitBreaker(
            threshold=self.config.circuit_breaker_threshold,
            timeout=self.config.circuit_breaker_timeout,
        ) if self.config.circuit_breaker_enabled else None

    # =========================================================================
    # Connection
    # =========================================================================

    async def initialize(self) -> bool:
        """Connect and ping. Returns False instead of raising."""
        if self._connected:
            return True

        async with self._connect_lock:
            if self._connected:
                return True
            try:
                self._pool = ConnectionPool.from_url(
                    self.config.redis_url,
                    max_connections=self.config.redis_max_connections,
                    socket_timeout=self.config.redis_socket_timeout,
                    socket_connect_timeout=self.config.redis_connect_timeout,
                )
                self._redis = Redis(connection_pool=self._pool)
                await self._redis.ping()
                self._connected = True
                logger.info(f"Redis cache connected: {self.config.redis_url}")
            except Exception as e:
                logger.error(f"Redis cache unavailable ({self.config.redis_url}): {e}")
                self._redis = None
                if self._pool is not None:
                    await self._pool.disconnect()
                self._pool = None
                if self._breaker:
                    await self._breaker.record_failure()

        return self._connected

    async def close(self):
        if self._redis is not None:
            await self._redis.aclose()
        if self._pool is not None:
            await self._pool.disconnect()
        self._redis = None
        self._pool = None
        self._connected = False
        logger.info("Redis cache closed")

    async def _ready(self) -> bool:
        if not self.config.enabled:
            return False
        if self._breaker and not await self._breaker.is_available():
            return False
        return await self.initialize()

    def _make_key(self, key: str) -> str:
        return f"{self.config.namespace}:{key}"

    async def _call(self, operation: str, key: str, command: Callable[[], Awaitable[Any]]) -> Tuple[bool, Any]:
        """
        Run one Redis command behind the breaker.

        Returns ``(ok, result)``; ``ok`` is False when the cache is not
        usable or the command failed.
        """
        if not await self._ready():
            return False, None

        try:
            result = await command()
        except (RedisError, OSError) as e:
            self._stats.errors += 1
            if self._breaker:
                await self._breaker.record_failure()
            logger.warning(f"Cache {operation} failed for {key}: {e}")
            return False, None

        if self._breaker:
            await self._breaker.record_success()
        return True, result

    # =========================================================================
    # CacheBackend
    # =========================================================================

    async def get(self, key: str) -> Optional[Any]:
        ok, raw = await self._call("get", key, lambda: self._redis.get(self._make_key(key)))
        if not ok or raw is None:
            self._stats.misses += 1
            logger.debug(f"Cache miss: {key}")
            return None

        try:
            value = deserialize_value(raw)
        except ValueError as e:
            self._stats.errors += 1
            logger.error(f"Discarding unreadable cache entry {key}: {e}")
            return None

        self._stats.hits += 1
        return value

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        data = serialize_value(value)
        ttl = ttl or self.config.default_ttl
        ok, _ = await self._call("set", key, lambda: self._redis.setex(self._make_key(key), ttl, data))
        return ok

    async def delete(self, key: str) -> bool:
        # Nothing can be stale in a disabled cache
        if not self.config.enabled:
            return True
        ok, _ = await self._call("delete", key, lambda: self._redis.delete(self._make_key(key)))
        return ok

    async def delete_pattern(self, pattern: str) -> int:
        ok, deleted = await self._call("delete_pattern", pattern, lambda: self._scan_delete(pattern))
        if ok and deleted:
            logger.debug(f"Deleted {deleted} cache keys matching {pattern}")
        return deleted if ok else 0

    async def _scan_delete(self, pattern: str) -> int:
        keys = [key async for key in self._redis.scan_iter(match=self._make_key(pattern), count=100)]
        if not keys:
            return 0
        return await self._redis.delete(*keys)

    # =========================================================================
    # Statistics and Health
    # =========================================================================

    def get_stats(self) -> Dict:
        return {
            "enabled": self.config.enabled,
            "connected": self._connected,
            "hits": self._stats.hits,
            "misses": self._stats.misses,
            "errors": self._stats.errors,
            "hit_rate_percent": round(self._stats.hit_rate * 100, 2),
            "circuit_breaker_open": bool(self._breaker and self._breaker.state.is_open),
        }

    async def health_check(self) -> Dict:
        if not self.config.enabled:
            return {"healthy": True, "status": "disabled"}
        if not await self.initialize():
            return {"healthy": False, "status": "unreachable", "stats": self.get_stats()}

        started = time.time()
        ok, _ = await self._call("ping", "-", lambda: self._redis.ping())
        if not ok:
            return {"healthy": False, "status": "error", "stats": self.get_stats()}
        return {
            "healthy": True,
            "status": "connected",
            "latency_ms": round((time.time() - started) * 1000, 2),
            "stats": self.get_stats(),
        }


_redis_cache: Optional[RedisCache] = None


async def get_redis_cache() -> RedisCache:
    """Process-wide cache. Connection happens lazily on first use."""
    global _redis_cache
    if _redis_cache is None:
        _redis_cache = RedisCache()
    return _redis_cache


async def close_redis_cache():
    global _redis_cache
    if _redis_cache is not None:
        await _redis_cache.close()
        _redis_cache = None
