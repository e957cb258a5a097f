"""
Tests for the shared Redis connection pool
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from intelhub.config import settings
from intelhub.redis_pool import RedisPoolManager


@pytest.fixture
def manager():
    manager = RedisPoolManager()
    saved = (manager._pool, manager._client)
    manager._pool = None
    manager._client = None
    yield manager
    manager._pool, manager._client = saved


@pytest.fixture
def redis_factory():
    pool = MagicMock()
    pool.disconnect = AsyncMock()
    client = MagicMock()
    client.aclose = AsyncMock()
    client.ping = AsyncMock(return_value=True)
    with (
        patch("intelhub.redis_pool.redis.ConnectionPool.from_url", return_value=pool) as from_url,
        patch("intelhub.redis_pool.redis.Redis", return_value=client),
    ):
        yield from_url, pool, client


class TestRedisPoolManager:
    def test_is_singleton(self):
        assert RedisPoolManager() is RedisPoolManager()

    def test_pool_created_on_first_use(self, manager, redis_factory, monkeypatch):
        from_url, _, client = redis_factory
        monkeypatch.setattr(settings, "redis_url", "redis://cache:6380/2")

        assert manager.client is client
        assert manager.client is client

        from_url.assert_called_once()
        assert from_url.call_args.args == ("redis://cache:6380/2",)
        assert from_url.call_args.kwargs["decode_responses"] is True
        assert from_url.call_args.kwargs["max_connections"] == settings.redis_max_connections

    @pytest.mark.asyncio
    async def test_close_releases_pool(self, manager, redis_factory):
        from_url, pool, client = redis_factory
        _ = manager.client

        await manager.close()

        client.aclose.assert_awaited_once()
        pool.disconnect.assert_awaited_once()
        assert manager._client is None
        assert manager._pool is None

    @pytest.mark.asyncio
    async def test_close_without_pool_is_noop(self, manager, redis_factory):
        from_url, _, _ = redis_factory

        await manager.close()

        from_url.assert_not_called()

    @pytest.mark.asyncio
    async def test_health_check_ok(self, manager, redis_factory):
        assert await manager.health_check() is True

    @pytest.mark.asyncio
    async def test_health_check_reports_unreachable_server(self, manager, redis_factory):
        _, _, client = redis_factory
        client.ping.side_effect = RedisConnectionError("connection refused")

        with patch("intelhub.redis_pool.logger") as mock_logger:
            assert await manager.health_check() is False

        mock_logger.error.assert_called_once()
