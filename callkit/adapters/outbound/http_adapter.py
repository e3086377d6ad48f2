"""
Base for HTTP-backed provider adapters.

Wraps the shared httpx client and turns non-success responses and
transport failures into ProviderRequestError.
"""
import logging
from typing import Any, Optional

import httpx

from callkit.core.exceptions import ProviderRequestError
from callkit.core.http_client import http_client

logger = logging.getLogger(__name__)


class HTTPProviderAdapter:
    """
    Mixin for adapters that talk to a REST API.

    Subclasses set provider_name and override _auth_headers(). Credentials are
    read from the provider config in __init__ and never re-read per call.
    """

    provider_name = "http"

    def __init__(self, base_url: str, timeout: float = 30.0, client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client or http_client.get_client()

    def _auth_headers(self) -> dict:
        return {}

    def _url(self, endpoint: str) -> str:
        if endpoint.startswith("http://") or endpoint.startswith("https://"):
            return endpoint
        return f"{self.base_url}{endpoint}"

    async def _send(
        self,
        method: str,
        endpoint: str,
        *,
        headers: Optional[dict] = None,
        timeout: Optional[float] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Issue one request. No retries: retry policy belongs to the caller."""
        request_headers = {**self._auth_headers(), **(headers or {})}
        try:
            response = await self.client.request(
                method,
                self._url(endpoint),
                headers=request_headers,
                timeout=timeout if timeout is not None else self.timeout,
                **kwargs,
            )
        except httpx.HTTPError as e:
            logger.error(f"❌ [{self.provider_name}] {method} {endpoint} failed: {type(e).__name__}: {e}")
            raise ProviderRequestError(self.provider_name, None, str(e), original_error=e) from e

        if not response.is_success:
            logger.error(
                f"❌ [{self.provider_name}] {method} {endpoint} -> {response.status_code}: "
                f"{response.text[:200]}"
            )
            raise ProviderRequestError(self.provider_name, response.status_code, response.text)

        return response

    async def _request_json(
        self, method: str, endpoint: str, *, required: tuple[str, ...] = (), **kwargs: Any
    ) -> Any:
        """
        Issue one request and decode its JSON body.

        Fields named in required must be present and non-empty; a success
        reply without them is treated as a provider error.
        """
        response = await self._send(method, endpoint, **kwargs)
        body: Any = {}
        if response.content:
            try:
                body = response.json()
            except ValueError as e:
                raise ProviderRequestError(
                    self.provider_name, response.status_code, response.text, original_error=e
                ) from e

        missing = [f for f in required if not (isinstance(body, dict) and body.get(f))]
        if missing:
            logger.error(
                f"❌ [{self.provider_name}] {method} {endpoint} -> {response.status_code} "
                f"without {', '.join(missing)}"
            )
            raise ProviderRequestError(self.provider_name, response.status_code, response.text)
        return body
