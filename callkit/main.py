import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from callkit.adapters.outbound.cache.redis_cache_adapter import redis_cache
from callkit.core.config import settings
from callkit.core.http_client import http_client
from callkit.core.secure_logging import configure_logging
from callkit.routers import system

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    logger.info(f"Starting {settings.PROJECT_NAME}...")

    await http_client.init()
    await redis_cache.connect()

    yield

    logger.info(f"Shutting down {settings.PROJECT_NAME}...")
    await redis_cache.close()
    await http_client.close()


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

app.include_router(system.router)
