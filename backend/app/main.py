import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

import redis.asyncio as redis
from fastapi import FastAPI
from fastapi.routing import APIRoute
from starlette.middleware.cors import CORSMiddleware

from app.api import rate_limit
from app.api.main import api_router
from app.core.config import settings
from app.core.db import init_db
from app.core.errors import register_exception_handlers

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def custom_generate_unique_id(route: APIRoute) -> str:
    return f"{route.tags[0]}-{route.name}"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting %s API (%s)", settings.PROJECT_NAME, settings.ENVIRONMENT)
    init_db()

    redis_client: redis.Redis | None = None
    if settings.REDIS_URL:
        redis_client = redis.from_url(settings.REDIS_URL)
        rate_limit.configure_redis(redis_client)
        logger.info("Rate limiting backed by Redis")

    sweeper = asyncio.create_task(
        rate_limit.sweep_periodically(settings.RATE_LIMIT_SWEEP_INTERVAL_SECONDS)
    )
    try:
        yield
    finally:
        sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweeper
        if redis_client is not None:
            rate_limit.configure_redis(None)
            await redis_client.aclose()
        logger.info("Shutting down %s API", settings.PROJECT_NAME)


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)

# Set all CORS enabled origins
if settings.all_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

register_exception_handlers(app)
app.include_router(api_router, prefix=settings.API_V1_STR)
