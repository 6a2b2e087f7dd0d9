"""
Unit tests for the Redis cache adapter.
"""

from unittest.mock import AsyncMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from api.cache import RedisCacheService


@pytest.fixture
def cache():
    """Create a cache with a mocked Redis client."""
    cache = RedisCacheService("redis://localhost:6379/0")
    cache.redis = AsyncMock()
    return cache


class TestRedisCacheService:
    """Test cases for RedisCacheService."""

    @pytest.mark.asyncio
    async def test_get_hit(self, cache):
        cache.redis.get.return_value = '{"success":true}'

        assert await cache.get("book:1") == '{"success":true}'
        cache.redis.get.assert_awaited_once_with("book:1")

    @pytest.mark.asyncio
    async def test_get_miss(self, cache):
        cache.redis.get.return_value = None

        assert await cache.get("book:1") is None

    @pytest.mark.asyncio
    async def test_set_uses_expiry(self, cache):
        await cache.set("books:all", "[]", 120)

        cache.redis.set.assert_awaited_once_with("books:all", "[]", ex=120)

    @pytest.mark.asyncio
    async def test_remove_existing_key(self, cache):
        cache.redis.delete.return_value = 1

        assert await cache.remove("book:1") is True

    @pytest.mark.asyncio
    async def test_remove_missing_key(self, cache):
        cache.redis.delete.return_value = 0

        assert await cache.remove("book:1") is False

    @pytest.mark.asyncio
    async def test_errors_propagate(self, cache):
        cache.redis.get.side_effect = RedisConnectionError("Connection refused")

        with pytest.raises(RedisConnectionError):
            await cache.get("book:1")

    @pytest.mark.asyncio
    async def test_connect_pings_server(self):
        cache = RedisCacheService("redis://localhost:6379/0")
        client = AsyncMock()

        with patch("api.cache.redis.from_url", return_value=client) as from_url:
            await cache.connect()

        from_url.assert_called_once()
        client.ping.assert_awaited_once()
        assert cache.redis is client

    @pytest.mark.asyncio
    async def test_connect_failure_raises(self):
        cache = RedisCacheService("redis://localhost:6379/0")
        client = AsyncMock()
        client.ping.side_effect = RedisConnectionError("Connection refused")

        with patch("api.cache.redis.from_url", return_value=client):
            with pytest.raises(RedisConnectionError):
                await cache.connect()

    @pytest.mark.asyncio
    async def test_health_check(self, cache):
        assert await cache.health_check() == {"status": "healthy"}

        cache.redis.ping.side_effect = RedisConnectionError("Connection refused")
        health = await cache.health_check()

        assert health["status"] == "unhealthy"

    @pytest.mark.asyncio
    async def test_close(self, cache):
        await cache.close()

        cache.redis.aclose.assert_awaited_once()
