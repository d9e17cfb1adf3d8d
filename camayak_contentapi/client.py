"""Camayak Content API client — signed GET requests over httpx.

Every request carries ``api_key`` (and ``api_sig`` when a shared secret
is configured) in its query string. Responses are returned as raw text;
callers decide how to parse them.

Error contract:
- httpx transport failures raise TransportError (wrapping the cause)
- Status outside [200, 300) raises ApiError(status_code, body)
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from camayak_contentapi.config import CONTENT_API_ENDPOINT, Credentials
from camayak_contentapi.errors import ApiError, TransportError
from camayak_contentapi.signing import signed_params

logger = logging.getLogger(__name__)


class ContentClient:
    """Thin async client for the Content API.

    One instance is built at startup and shared by every request; the
    underlying ``httpx.AsyncClient`` only keeps its connection pool.
    """

    def __init__(
        self,
        credentials: Credentials,
        endpoint: str = CONTENT_API_ENDPOINT,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self._credentials = credentials
        self._endpoint = endpoint if endpoint.endswith("/") else endpoint + "/"
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def signed_url(self, url: str, extra: dict[str, Any] | None = None) -> httpx.URL:
        """Return ``url`` with a freshly signed query merged into it."""
        params: dict[str, Any] = dict(extra or {})
        params.update(signed_params(self._credentials))
        return httpx.URL(url).copy_merge_params(params)

    async def list(self, **options: Any) -> str:
        """List assignments in the publishing destination."""
        return await self._get(self._endpoint, options)

    async def get(self, uuid: str) -> str:
        """Fetch one assignment by its identifier."""
        return await self._get(f"{self._endpoint}{uuid}/")

    async def fetch(self, resource_uri: str) -> str:
        """Fetch the resource named by an inbound webhook event."""
        return await self._get(resource_uri)

    async def _get(self, url: str, options: dict[str, Any] | None = None) -> str:
        try:
            signed = self.signed_url(url, options)
            # The query carries credentials, log the path only
            logger.debug("Content API GET %s%s", signed.host, signed.path)
            response = await self._http.get(signed)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Content API request failed (%s)", type(e).__name__)
            raise TransportError(e) from e

        if not 200 <= response.status_code < 300:
            logger.info(
                "Content API returned HTTP %d for %s",
                response.status_code,
                signed.path,
            )
            raise ApiError(response.status_code, response.text)
        return response.text

    async def aclose(self) -> None:
        await self._http.aclose()
