"""Redis response cache for deal listings, catalog reads and site settings.

A Redis outage never fails a request: reads degrade to misses and writes
report False.
"""

from typing import Optional

import structlog
from redis.asyncio import Redis, from_url
from redis.exceptions import RedisError

from dealboard.config import settings

logger = structlog.get_logger(__name__)

DEALS_PREFIX = "deals"
CATALOG_PREFIX = "catalog"
CURRENCY_KEY = "settings:currency"


class CacheService:
    """Async Redis cache with TTLs and pattern invalidation."""

    def __init__(self, redis_url: str):
        self.redis_url = redis_url
        self._redis: Optional[Redis] = None
        self.logger = logger.bind(service="cache_service")

    async def _get_redis(self) -> Redis:
        if self._redis is None:
            self._redis = from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
            self.logger.info("redis_connection_created", url=self.redis_url)
        return self._redis

    async def get(self, key: str) -> Optional[str]:
        """Cached value, or None on a miss or a Redis error."""
        try:
            redis = await self._get_redis()
            value = await redis.get(key)
        except RedisError as e:
            self.logger.warning("cache_get_failed", key=key, error=str(e))
            return None

        self.logger.debug("cache_hit" if value else "cache_miss", key=key)
        return value

    async def set(self, key: str, value: str, ttl: int = 300) -> bool:
        """Store a value for ``ttl`` seconds. Returns False on a Redis error."""
        try:
            redis = await self._get_redis()
            await redis.set(key, value, ex=ttl)
        except RedisError as e:
            self.logger.warning("cache_set_failed", key=key, error=str(e))
            return False

        self.logger.debug("cache_set", key=key, ttl=ttl)
        return True

    async def delete(self, key: str) -> bool:
        try:
            redis = await self._get_redis()
            return bool(await redis.delete(key))
        except RedisError as e:
            self.logger.warning("cache_delete_failed", key=key, error=str(e))
            return False

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern such as ``deals:*``.

        Returns:
            Number of keys deleted, 0 on error
        """
        try:
            redis = await self._get_redis()
            keys = [key async for key in redis.scan_iter(match=pattern, count=100)]
            deleted = await redis.delete(*keys) if keys else 0
        except RedisError as e:
            self.logger.warning("cache_pattern_delete_failed", pattern=pattern, error=str(e))
            return 0

        self.logger.info("cache_pattern_delete", pattern=pattern, keys_deleted=deleted)
        return deleted

    async def health_check(self) -> bool:
        try:
            redis = await self._get_redis()
            await redis.ping()
            return True
        except (RedisError, OSError) as e:
            self.logger.error("redis_health_check_failed", error=str(e))
            return False

    async def close(self) -> None:
        """Close the Redis connection on application shutdown."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None
            self.logger.info("redis_connection_closed")


# Global cache instance
_cache_instance: Optional[CacheService] = None


def get_cache_service() -> CacheService:
    """Get or create the process-wide cache service."""
    global _cache_instance

    if _cache_instance is None:
        _cache_instance = CacheService(settings.REDIS_URL)
        logger.info("cache_service_initialized", redis_url=settings.REDIS_URL)

    return _cache_instance


async def get_cache() -> CacheService:
    """FastAPI dependency for the cache service."""
    return get_cache_service()


async def invalidate_deals_cache() -> int:
    """Drop cached deal listings. Call after any change to deal rows or votes."""
    deleted = await get_cache_service().delete_pattern(f"{DEALS_PREFIX}:*")
    logger.info("deals_cache_invalidated", keys_deleted=deleted)
    return deleted


async def invalidate_catalog_cache() -> int:
    """Drop cached category and shop listings."""
    return await get_cache_service().delete_pattern(f"{CATALOG_PREFIX}:*")


def cache_key_for_deals(
    page: int = 1,
    limit: int = 12,
    category_slug: Optional[str] = None,
    shop_slug: Optional[str] = None,
    search: Optional[str] = None,
    sort_by: str = "hot",
) -> str:
    """Cache key for one page of the public deal listing."""
    parts = [DEALS_PREFIX, f"p{page}", f"l{limit}", f"s{sort_by}"]

    if category_slug:
        parts.append(f"c{category_slug}")
    if shop_slug:
        parts.append(f"sh{shop_slug}")
    if search:
        parts.append(f"q{search.lower()}")

    return ":".join(parts)
