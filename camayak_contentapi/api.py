"""CamayakContentAPI — one object wiring credentials, client, router and app.

Usage:
    from camayak_contentapi import CamayakContentAPI

    async def publish(webhook, content):
        post = await my_cms.create(content)
        webhook.succeed({"published_id": post.id, "published_url": post.url})

    camayak = CamayakContentAPI(api_key="...", shared_secret="...", publish=publish)
    camayak.start()
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
import uvicorn

from camayak_contentapi.client import ContentClient
from camayak_contentapi.config import (
    CONTENT_API_ENDPOINT,
    DEFAULT_PORT,
    Credentials,
    Settings,
)
from camayak_contentapi.router import (
    ContentHandler,
    ErrorHandler,
    EventRouter,
    WebhookHandlers,
)
from camayak_contentapi.server import create_app

logger = logging.getLogger(__name__)


class CamayakContentAPI:
    """Webhook receiver plus Content API client for one publishing destination."""

    def __init__(
        self,
        api_key: str,
        shared_secret: str | None = None,
        port: int = DEFAULT_PORT,
        publish: ContentHandler | None = None,
        update: ContentHandler | None = None,
        retract: ContentHandler | None = None,
        error: ErrorHandler | None = None,
        endpoint: str = CONTENT_API_ENDPOINT,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        host: str = "0.0.0.0",
        shutdown_timeout: float = 10.0,
    ):
        if not api_key:
            raise ValueError("api_key is required")

        self.credentials = Credentials(api_key=api_key, shared_secret=shared_secret or None)
        self.port = port
        self.host = host
        self.client = ContentClient(
            self.credentials, endpoint=endpoint, http_client=http_client, timeout=timeout
        )
        self.router = EventRouter(
            self.client,
            WebhookHandlers.build(
                publish=publish, update=update, retract=retract, error=error
            ),
        )
        self.app = create_app(self.router, self.client, shutdown_timeout=shutdown_timeout)

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **kwargs: Any) -> CamayakContentAPI:
        """Build from CAMAYAK_* environment settings.

        kwargs carry the handlers and override any setting of the same name.
        """
        settings = settings or Settings()
        options: dict[str, Any] = {
            "api_key": settings.api_key,
            "shared_secret": settings.shared_secret,
            "port": settings.port,
            "host": settings.host,
            "endpoint": settings.content_api_endpoint,
            "timeout": settings.request_timeout,
            "shutdown_timeout": settings.shutdown_timeout,
        }
        options.update(kwargs)
        return cls(**options)

    async def list(self, **options: Any) -> str:
        return await self.client.list(**options)

    async def get(self, uuid: str) -> str:
        return await self.client.get(uuid)

    def start(self) -> None:
        """Serve webhooks until interrupted."""
        logger.info(
            "Camayak content API webhook receiver starting on port %d", self.port
        )
        uvicorn.run(self.app, host=self.host, port=self.port)
