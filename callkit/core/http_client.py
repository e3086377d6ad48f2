import logging
from typing import Optional

import httpx

from callkit.core.config import settings

logger = logging.getLogger(__name__)


class HTTPClient:
    """
    Singleton wrapper for httpx.AsyncClient.
    Enables connection pooling (keep-alive) across all provider adapters.
    """
    _client: Optional[httpx.AsyncClient] = None

    @classmethod
    def get_client(cls) -> httpx.AsyncClient:
        """
        Get the shared AsyncClient instance.
        Should be initialized in the app lifespan; falls back to a lazily
        created client (e.g. scripts, tests) that close() will still release.
        """
        if cls._client is None:
            logger.warning("⚠️ HTTPClient accessed before initialization! Creating instance lazily.")
            cls._client = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
        return cls._client

    @classmethod
    async def init(cls):
        """Initialize the client (Call in startup)."""
        if cls._client is None:
            cls._client = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)

    @classmethod
    async def close(cls):
        """Close the client (Call in shutdown)."""
        if cls._client:
            await cls._client.aclose()
            cls._client = None


# Global Accessor
http_client = HTTPClient
