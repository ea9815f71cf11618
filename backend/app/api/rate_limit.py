"""
Fixed-window request limiting.

Each request increments a counter keyed by (prefix, client, window index) where
the window index is floor(now / window). Counters live in process memory, or in
Redis when REDIS_URL is configured so several API workers share one budget.
"""

import asyncio
import logging
import math
import threading
import time
from collections.abc import Callable

import redis.asyncio as redis
from fastapi import Request, Response
from redis.exceptions import RedisError

from app.core.config import settings
from app.core.errors import RateLimitExceeded

logger = logging.getLogger(__name__)

# (count, seconds until the window resets)
Hit = tuple[int, float]


def _window_bounds(now: float, window_seconds: int) -> tuple[int, float]:
    index = int(now // window_seconds)
    return index, (index + 1) * window_seconds - now


class MemoryRateLimitStore:
    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._lock = threading.Lock()
        # bucket key -> (count, window end timestamp)
        self._buckets: dict[str, tuple[int, float]] = {}

    def hit(self, key: str, window_seconds: int) -> Hit:
        now = self._clock()
        index, reset_after = _window_bounds(now, window_seconds)
        bucket = f"{key}:{index}"
        with self._lock:
            count, window_end = self._buckets.get(bucket, (0, now + reset_after))
            count += 1
            self._buckets[bucket] = (count, window_end)
        return count, reset_after

    def sweep(self) -> int:
        """Drop counters whose window has ended. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [bucket for bucket, (_, window_end) in self._buckets.items() if window_end <= now]
            for bucket in expired:
                del self._buckets[bucket]
        if expired:
            logger.debug("Swept %s expired rate-limit windows", len(expired))
        return len(expired)

    def reset(self) -> None:
        with self._lock:
            self._buckets.clear()

    def __len__(self) -> int:
        return len(self._buckets)


class RedisRateLimitStore:
    def __init__(self, redis_client: redis.Redis, key_prefix: str = "ratelimit"):
        self.redis = redis_client
        self.key_prefix = key_prefix

    async def hit(self, key: str, window_seconds: int) -> Hit:
        now = time.time()
        index, reset_after = _window_bounds(now, window_seconds)
        bucket = f"{self.key_prefix}:{key}:{index}"

        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.incr(bucket)
            pipe.pttl(bucket)
            count, ttl = await pipe.execute()

        # First hit in this window, or a key that lost its expiry
        if count == 1 or ttl < 0:
            await self.redis.pexpire(bucket, max(1, math.ceil(reset_after * 1000)))
        return int(count), reset_after


memory_store = MemoryRateLimitStore()
_redis_store: RedisRateLimitStore | None = None


def configure_redis(redis_client: redis.Redis | None) -> None:
    """Route counters through Redis (or back to process memory when None)."""
    global _redis_store
    _redis_store = RedisRateLimitStore(redis_client) if redis_client is not None else None


async def sweep_periodically(interval_seconds: int) -> None:
    while True:
        await asyncio.sleep(interval_seconds)
        memory_store.sweep()


def client_identifier(request: Request) -> str:
    if request.client and request.client.host:
        return request.client.host
    return "anonymous"


class RateLimiter:
    """
    FastAPI dependency enforcing a fixed-window ceiling per client.

    Limits default to RATE_LIMIT_MAX_REQUESTS per RATE_LIMIT_WINDOW_SECONDS and
    are read from settings on every call.
    """

    def __init__(
        self,
        prefix: str,
        *,
        max_requests: int | None = None,
        window_seconds: int | None = None,
        store: MemoryRateLimitStore | RedisRateLimitStore | None = None,
    ):
        self.prefix = prefix
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._store = store

    @property
    def max_requests(self) -> int:
        return self._max_requests or settings.RATE_LIMIT_MAX_REQUESTS

    @property
    def window_seconds(self) -> int:
        return self._window_seconds or settings.RATE_LIMIT_WINDOW_SECONDS

    async def hit(self, identifier: str) -> Hit:
        key = f"{self.prefix}:{identifier}"
        store = self._store if self._store is not None else (_redis_store or memory_store)
        if isinstance(store, RedisRateLimitStore):
            try:
                return await store.hit(key, self.window_seconds)
            except RedisError as exc:
                logger.warning("Redis rate-limit store unavailable, using memory: %s", exc)
                store = memory_store
        return store.hit(key, self.window_seconds)

    async def __call__(self, request: Request, response: Response) -> None:
        identifier = client_identifier(request)
        count, reset_after = await self.hit(identifier)

        reset_seconds = min(self.window_seconds, max(1, math.ceil(reset_after)))
        headers = {
            "X-RateLimit-Limit": str(self.max_requests),
            "X-RateLimit-Remaining": str(max(self.max_requests - count, 0)),
            "X-RateLimit-Reset": str(reset_seconds),
        }
        if count > self.max_requests:
            logger.warning(
                "Rate limit exceeded for %s on %s (%s/%s)",
                identifier,
                self.prefix,
                count,
                self.max_requests,
            )
            raise RateLimitExceeded(reset_seconds, headers={**headers, "Retry-After": str(reset_seconds)})
        response.headers.update(headers)


api_limiter = RateLimiter("api")
generation_limiter = RateLimiter("generate", max_requests=10, window_seconds=60)
auth_limiter = RateLimiter("auth", max_requests=5, window_seconds=60)
