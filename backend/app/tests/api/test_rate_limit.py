import pytest
from fakeredis import FakeAsyncRedis
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

from app.api.rate_limit import (
    MemoryRateLimitStore,
    RateLimiter,
    RedisRateLimitStore,
    memory_store,
)
from app.core.config import settings
from app.core.errors import register_exception_handlers


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def _app_with(limiter: RateLimiter) -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/limited", dependencies=[Depends(limiter)])
    def limited() -> dict:
        return {"ok": True}

    return app


def test_request_over_the_ceiling_is_rejected():
    limiter = RateLimiter("test", max_requests=3, window_seconds=60, store=MemoryRateLimitStore(clock=FakeClock()))
    client = TestClient(_app_with(limiter))

    for remaining in (2, 1, 0):
        response = client.get("/limited")
        assert response.status_code == 200
        assert response.headers["X-RateLimit-Limit"] == "3"
        assert response.headers["X-RateLimit-Remaining"] == str(remaining)

    response = client.get("/limited")
    assert response.status_code == 429
    body = response.json()
    assert body["status"] == "error"
    assert body["retryAfter"] == 20
    assert body["retryAfter"] <= limiter.window_seconds
    assert response.headers["Retry-After"] == str(body["retryAfter"])
    assert response.headers["X-RateLimit-Remaining"] == "0"


@pytest.mark.asyncio
async def test_other_clients_are_unaffected():
    limiter = RateLimiter("test", max_requests=1, window_seconds=60, store=MemoryRateLimitStore())

    assert (await limiter.hit("10.0.0.1"))[0] == 1
    assert (await limiter.hit("10.0.0.1"))[0] == 2
    assert (await limiter.hit("10.0.0.2"))[0] == 1


@pytest.mark.asyncio
async def test_injected_store_is_used_while_empty():
    store = MemoryRateLimitStore()
    limiter = RateLimiter("own", max_requests=5, window_seconds=60, store=store)

    await limiter.hit("1.1.1.1")

    assert len(store) == 1
    assert len(memory_store) == 0


@pytest.mark.asyncio
async def test_memory_store_counts_per_window_and_sweeps():
    clock = FakeClock(now=120.0)
    store = MemoryRateLimitStore(clock=clock)
    limiter = RateLimiter("api", max_requests=2, window_seconds=60, store=store)

    assert (await limiter.hit("1.2.3.4"))[0] == 1
    count, reset_after = await limiter.hit("1.2.3.4")
    assert count == 2
    assert reset_after == 60.0

    clock.now = 150.0
    count, reset_after = await limiter.hit("1.2.3.4")
    assert count == 3
    assert reset_after == 30.0

    # Next window starts a fresh count
    clock.now = 181.0
    assert (await limiter.hit("1.2.3.4"))[0] == 1

    assert len(store) == 2
    assert store.sweep() == 1
    assert len(store) == 1


def test_limits_default_to_settings(monkeypatch):
    monkeypatch.setattr(settings, "RATE_LIMIT_MAX_REQUESTS", 7)
    monkeypatch.setattr(settings, "RATE_LIMIT_WINDOW_SECONDS", 30)
    limiter = RateLimiter("api")

    assert limiter.max_requests == 7
    assert limiter.window_seconds == 30


@pytest.mark.asyncio
async def test_redis_store_counts_and_expires_windows():
    redis_client = FakeAsyncRedis()
    store = RedisRateLimitStore(redis_client)
    limiter = RateLimiter("auth", max_requests=5, window_seconds=60, store=store)

    counts = [(await limiter.hit("5.6.7.8"))[0] for _ in range(3)]

    assert counts == [1, 2, 3]
    keys = await redis_client.keys("ratelimit:auth:5.6.7.8:*")
    assert len(keys) == 1
    ttl = await redis_client.pttl(keys[0])
    assert 0 < ttl <= 60_000
    await redis_client.aclose()


@pytest.mark.asyncio
async def test_redis_failure_falls_back_to_memory():
    class BrokenRedisStore(RedisRateLimitStore):
        async def hit(self, key, window_seconds):
            raise RedisConnectionError("connection refused")

    limiter = RateLimiter("fallback", max_requests=5, window_seconds=60, store=BrokenRedisStore(FakeAsyncRedis()))

    count, _ = await limiter.hit("9.9.9.9")

    assert count == 1
    assert len(memory_store) == 1
