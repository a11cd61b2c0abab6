"""Shared async Redis client for cross-process rate limits."""
import logging

from redis.asyncio import Redis

from coupongen.config import get_settings

logger = logging.getLogger(__name__)

_client: Redis | None = None


def get_redis() -> Redis | None:
    """Return the shared client, or None when REDIS_URL is not configured."""
    global _client
    url = (get_settings().redis_url or "").strip()
    if not url:
        return None
    if _client is None:
        _client = Redis.from_url(url, encoding="utf-8", decode_responses=True)
    return _client


async def close_redis() -> None:
    global _client
    client = _client
    _client = None
    if client is not None:
        await client.aclose()
