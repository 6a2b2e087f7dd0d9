"""
Redis cache adapter for serialized service responses.
"""

from typing import Dict, Optional

import redis.asyncio as redis
import structlog

from api.interfaces import CacheService

logger = structlog.get_logger(__name__)


class RedisCacheService(CacheService):
    """Redis-backed key-value cache. Errors are raised to the caller."""

    def __init__(self, redis_url: str):
        self.redis_url = redis_url
        self.redis: Optional[redis.Redis] = None

    async def connect(self) -> None:
        """Open the connection pool and verify the server answers."""
        try:
            self.redis = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                health_check_interval=30
            )
            await self.redis.ping()
            logger.info("Redis cache connected", url=self.redis_url)

        except Exception as e:
            logger.error("Failed to connect to Redis", error=str(e))
            raise

    async def close(self) -> None:
        """Close the connection pool."""
        if self.redis:
            await self.redis.aclose()
            logger.info("Redis cache closed")

    async def get(self, key: str) -> Optional[str]:
        return await self.redis.get(key)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self.redis.set(key, value, ex=ttl_seconds)

    async def remove(self, key: str) -> bool:
        # DEL reports how many keys it removed, so no separate EXISTS round trip
        return await self.redis.delete(key) > 0

    async def health_check(self) -> Dict:
        try:
            await self.redis.ping()
            return {"status": "healthy"}
        except Exception as e:
            logger.error("Cache health check failed", error=str(e))
            return {"status": "unhealthy", "error": str(e)}
