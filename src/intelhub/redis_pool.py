"""Shared Redis connection pool.

Edit contexts are the only Redis consumer. Every request touching them goes
through one pool so that concurrent GraphQL resolvers reuse connections
instead of dialing Redis each time.
"""

from __future__ import annotations

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool
from redis.exceptions import RedisError

from .config import settings
from .logging import get_logger

logger = get_logger(__name__)


class RedisPoolManager:
    """Owns the process-wide Redis pool and client."""

    _instance: RedisPoolManager | None = None
    _pool: ConnectionPool | None = None
    _client: redis.Redis | None = None

    def __new__(cls) -> RedisPoolManager:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def _connect(self) -> redis.Redis:
        # Built on first use: importing the module must not touch the network,
        # and `settings.redis_url` may be overridden after import (tests, CLI).
        self._pool = redis.ConnectionPool.from_url(
            settings.redis_url,
            decode_responses=True,  # edit context payloads are JSON text
            max_connections=settings.redis_max_connections,
            socket_connect_timeout=settings.redis_socket_timeout,
            socket_timeout=settings.redis_socket_timeout,
            retry_on_timeout=True,
            health_check_interval=30,  # ping idle connections before reuse
        )
        self._client = redis.Redis(connection_pool=self._pool)
        logger.info(
            "Redis connection pool initialized",
            max_connections=settings.redis_max_connections,
        )
        return self._client

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            return self._connect()
        return self._client

    async def close(self) -> None:
        """Release every pooled connection; the next `client` access reconnects."""
        if self._client is not None:
            await self._client.aclose()
            logger.info("Redis client closed")
        if self._pool is not None:
            await self._pool.disconnect()
            logger.info("Redis connection pool disconnected")
        self._client = None
        self._pool = None

    async def health_check(self) -> bool:
        try:
            await self.client.ping()
        except (RedisError, OSError) as e:
            logger.error("Redis health check failed", error=str(e))
            return False
        return True


# Global instance
_redis_pool_manager = RedisPoolManager()


def get_redis_client() -> redis.Redis:
    return _redis_pool_manager.client


async def close_redis_pool() -> None:
    """Close the Redis connection pool.

    Called from the application lifespan on shutdown.
    """
    await _redis_pool_manager.close()


async def check_redis_health() -> bool:
    """Ping Redis; a failure is logged and reported as False."""
    return await _redis_pool_manager.health_check()
