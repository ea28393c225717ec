"""
Redis connection for the JWT blacklist.

Callers reach the client through this module (`redis_client.redis_client`)
so tests can swap it for an in-process fake.
"""

import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from triplog.app.core.config import settings

logger = logging.getLogger(__name__)

redis_client = redis.from_url(
    settings.redis_url,
    decode_responses=settings.redis_decode_responses,
)


async def ping_redis() -> bool:
    """Report whether the blacklist store answers; used by the health check."""
    try:
        return bool(await redis_client.ping())
    except (RedisError, OSError) as e:
        logger.warning("Redis unreachable at %s: %s", settings.redis_url, e)
        return False


async def close_redis() -> None:
    await redis_client.aclose()
