"""Redis-backed rate limit store for multi-instance deployments.

Each record is a hash ``{count, reset_at}`` that expires shortly after its
window ends. Cross-instance atomicity of check-then-increment comes from a
Redis lock per key.
"""

from __future__ import annotations

import math

import redis.asyncio as aioredis
from redis.asyncio.lock import Lock
from redis.exceptions import ConnectionError as RedisConnectionError
from tiktrend_service_libs.logging_utils import create_service_logger

from services.early_access_service.protocols import RateLimitRecord, RateLimitStore

logger = create_service_logger("early_access_service.rate_limit_store.redis")


class RedisRateLimitStore(RateLimitStore):
    """RateLimitStore on Redis hashes with lifecycle management."""

    def __init__(
        self,
        client: aioredis.Redis,
        *,
        lock_timeout_seconds: float = 5.0,
        expiry_grace_seconds: int = 1,
    ) -> None:
        """
        Args:
            client: redis.asyncio client created with decode_responses=True
            lock_timeout_seconds: Lock auto-release and acquisition timeout
            expiry_grace_seconds: Seconds a record outlives its window
        """
        self.client = client
        self.lock_timeout_seconds = lock_timeout_seconds
        self.expiry_grace_seconds = expiry_grace_seconds

    @classmethod
    def from_url(cls, redis_url: str) -> RedisRateLimitStore:
        client = aioredis.from_url(
            redis_url,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        return cls(client)

    async def start(self) -> None:
        """Verify connectivity so a misconfigured URL fails at startup."""
        try:
            await self.client.ping()
            logger.info("Redis rate limit store connected")
        except RedisConnectionError as e:
            logger.error(f"Redis rate limit store failed to connect: {e}")
            raise

    async def stop(self) -> None:
        try:
            await self.client.aclose()
            logger.info("Redis rate limit store disconnected")
        except Exception as e:
            logger.error(f"Error stopping Redis rate limit store: {e}", exc_info=True)

    async def get(self, key: str) -> RateLimitRecord | None:
        raw = await self.client.hgetall(key)
        if not raw:
            return None
        try:
            return RateLimitRecord(count=int(raw["count"]), reset_at=float(raw["reset_at"]))
        except (KeyError, ValueError, TypeError):
            # Corrupt record: treat as absent so the caller starts a new window
            logger.warning(f"Discarding malformed rate limit record for key '{key}': {raw}")
            return None

    async def set(self, key: str, record: RateLimitRecord) -> None:
        async with self.client.pipeline(transaction=True) as pipe:
            pipe.delete(key)
            pipe.hset(key, mapping={"count": record.count, "reset_at": record.reset_at})
            pipe.expireat(key, math.ceil(record.reset_at) + self.expiry_grace_seconds)
            await pipe.execute()

    async def increment(self, key: str) -> int:
        return int(await self.client.hincrby(key, "count", 1))

    def lock(self, key: str) -> Lock:
        return self.client.lock(
            f"{key}:lock",
            timeout=self.lock_timeout_seconds,
            blocking_timeout=self.lock_timeout_seconds,
        )
