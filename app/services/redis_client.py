# app/services/redis_client.py
import json
from typing import Any

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool

from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class RedisCache:
    """Pooled Redis client used as a read-through cache. Errors degrade to misses."""

    def __init__(self, redis_url: str, max_connections: int = 20):
        self.redis_url = redis_url
        self.max_connections = max_connections
        self.pool: ConnectionPool | None = None
        self.client: redis.Redis | None = None
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize connection pool on startup"""
        if self._initialized:
            return

        try:
            self.pool = ConnectionPool.from_url(
                self.redis_url,
                max_connections=self.max_connections,
                retry_on_timeout=True,
                socket_connect_timeout=10,
                socket_timeout=10,
                health_check_interval=30,
                decode_responses=True,
            )
            self.client = redis.Redis(connection_pool=self.pool)

            await self.client.ping()
            self._initialized = True
            logger.info("Redis cache initialized", max_connections=self.max_connections)

        except Exception as e:
            logger.error("Failed to initialize Redis cache", error=str(e))
            self._initialized = False
            raise RuntimeError("Redis initialization failed") from e

    async def close(self) -> None:
        """Clean shutdown"""
        try:
            if self.client:
                await self.client.aclose()
            if self.pool:
                await self.pool.disconnect()
            logger.info("Redis cache closed")
        except Exception as e:
            logger.error("Error closing Redis client", error=str(e))
        finally:
            self._initialized = False

    async def ping(self) -> bool:
        if not self._initialized:
            return False
        try:
            return bool(await self.client.ping())
        except Exception as e:
            logger.error("Redis ping failed", error=str(e))
            return False

    async def get_json(self, key: str) -> Any | None:
        """Return the decoded value, or None on miss or error."""
        if not self._initialized:
            return None
        try:
            raw = await self.client.get(key)
            return json.loads(raw) if raw else None
        except Exception as e:
            logger.error("Redis GET failed", key=key[:60], error=str(e))
            return None

    async def set_json(self, key: str, value: Any, ttl_s: int | None = None) -> bool:
        if not self._initialized:
            return False
        try:
            payload = json.dumps(value, default=str)
            if ttl_s:
                result = await self.client.setex(key, ttl_s, payload)
            else:
                result = await self.client.set(key, payload)
            return bool(result)
        except Exception as e:
            logger.error("Redis SET failed", key=key[:60], error=str(e))
            return False

    async def health_check(self) -> dict:
        healthy = await self.ping()
        result = {"healthy": healthy, "service": "redis_cache"}
        if not healthy:
            result["error"] = "Redis ping failed" if self._initialized else "Redis not initialized"
        return result
