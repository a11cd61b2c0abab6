"""Sliding window rate limiter used as a FastAPI dependency.

With REDIS_URL set, counts are kept in Redis (fixed window) so the limit
holds across worker processes; otherwise buckets live in process memory.
"""
import logging
import math
import time
from collections import defaultdict, deque
from typing import Awaitable, Callable, DefaultDict, Deque, Hashable

from fastapi import HTTPException, Request, status
from redis.exceptions import RedisError

from coupongen.config import get_settings
from coupongen.redis_client import get_redis

WindowBucket = Deque[float]

logger = logging.getLogger(__name__)


def _too_many(retry_after_seconds: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail="Too many requests",
        headers={"Retry-After": str(retry_after_seconds)},
    )


def _prune(bucket: WindowBucket, now: float, window_seconds: int) -> None:
    while bucket and now - bucket[0] > window_seconds:
        bucket.popleft()


def _enforce_limit(bucket: WindowBucket, limit: int, window_seconds: int, now: float) -> None:
    _prune(bucket, now, window_seconds)
    if len(bucket) >= limit:
        retry_after_seconds = 1
        if bucket:
            retry_after_seconds = max(1, int(math.ceil(bucket[0] + window_seconds - now)))
        raise _too_many(retry_after_seconds)
    bucket.append(now)


async def _enforce_limit_redis(key: Hashable, identifier: Hashable, limit: int,
                               window_seconds: int, now: float) -> bool:
    """Count the request in Redis; False when Redis is not in use."""
    client = get_redis()
    if client is None:
        return False

    now_int = int(now)
    window_seconds = max(1, int(window_seconds))
    redis_key = f"rate_limit:{key}:{identifier}:{now_int // window_seconds}"
    try:
        count = await client.incr(redis_key)
        if count == 1:
            await client.expire(redis_key, window_seconds)
    except RedisError as e:
        logger.warning(f"Redis rate limit unavailable, using process buckets: {e}")
        return False

    if int(count) > limit:
        raise _too_many(max(1, window_seconds - now_int % window_seconds))
    return True


def client_ip(request: Request) -> str:
    """Peer address; X-Forwarded-For only counts when the proxy is trusted."""
    if get_settings().trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def per_identifier_limiter(
    identifier_fn: Callable[[Request], Hashable],
    limit: int,
    window_seconds: int,
    key: Hashable = "default",
) -> Callable[[Request], Awaitable[None]]:
    """
    Rate limiter keyed by a per-request identifier (e.g. client IP).

    ``dependency.buckets`` holds the in-process fallback state and is
    exposed so tests can reset it.
    """
    buckets: DefaultDict[Hashable, WindowBucket] = defaultdict(deque)

    async def dependency(request: Request) -> None:
        ident = identifier_fn(request)
        now = time.time()
        if not await _enforce_limit_redis(key, ident, limit, window_seconds, now):
            _enforce_limit(buckets[ident], limit, window_seconds, now)

    dependency.buckets = buckets  # type: ignore[attr-defined]
    return dependency
