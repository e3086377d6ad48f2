import logging

from fastapi import APIRouter, HTTPException, status

from callkit.adapters.outbound.cache.redis_cache_adapter import redis_cache
from callkit.core.exceptions import AppError
from callkit.core.secure_logging import sanitize_dict
from callkit.infrastructure.adapter_factory import get_adapter_info
from callkit.infrastructure.provider_registry import get_provider_registry

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", tags=["System"], status_code=status.HTTP_200_OK)
async def health_check():
    """
    Health Check Endpoint.
    Redis is optional: the cache fails open, so a missing Redis only degrades.
    """
    redis_ok = await redis_cache.ensure_connected()
    health_status = {
        "status": "healthy",
        "redis": "connected" if redis_ok else "disconnected",
    }
    if not redis_ok:
        health_status["status"] = "degraded"
    return health_status


@router.get("/adapters", tags=["System"])
async def adapters_info():
    """Active provider per capability plus every registered provider."""
    try:
        active = get_adapter_info()
    except AppError as e:
        logger.error(f"❌ [System] Adapter resolution failed: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"code": e.code, "message": e.message, "details": sanitize_dict(e.details)},
        ) from e

    return {
        "active": active,
        "available": get_provider_registry().get_available_providers(),
    }
