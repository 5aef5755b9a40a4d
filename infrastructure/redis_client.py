# ============================================================================
# REDIS CLIENT
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Infrastructure - Async Redis connection management
# PURPOSE: Shared redis.asyncio client for the health history store
# CREATED: 12 OCT 2026
# ============================================================================
"""
Redis Client

One redis.asyncio client per application, created in the FastAPI
lifespan and closed on shutdown.

Usage:
    from infrastructure.redis_client import init_redis

    client = await init_redis()
    await client.zadd("key", {"member": 1})
"""

import logging
import os
from typing import Optional

import redis.asyncio as aioredis

logger = logging.getLogger(__name__)

# Global client instance
_client: Optional[aioredis.Redis] = None


def get_redis_url() -> str:
    """REDIS_URL, defaulting to a local instance."""
    return os.environ.get("REDIS_URL", "redis://localhost:6379/0")


async def init_redis(url: Optional[str] = None) -> aioredis.Redis:
    """
    Initialize the global Redis client.

    A failed ping is logged, not raised: history is best-effort and the
    monitor keeps probing while Redis is down.
    """
    global _client

    if _client is not None:
        logger.warning("Redis client already initialized, returning existing client")
        return _client

    redis_url = url or get_redis_url()
    _client = aioredis.from_url(redis_url, decode_responses=True)

    try:
        await _client.ping()
        logger.info(f"Redis connected: {redis_url.split('@')[-1]}")
    except aioredis.RedisError as e:
        logger.warning(f"Redis ping failed, history will be degraded: {e}")

    return _client


async def close_redis() -> None:
    """Close the global Redis client."""
    global _client

    if _client is not None:
        await _client.aclose()
        _client = None
        logger.info("Redis client closed")


__all__ = [
    "get_redis_url",
    "init_redis",
    "close_redis",
]
