"""Webhook HTTP routes — FastAPI transport for the event router.

Routes:
- GET /, GET /webhook/   liveness probe, 200 "Ok."
- POST /webhook/         Camayak webhook; answered by the router (validate)
                         or held open until the handler resolves its responder
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response

from camayak_contentapi.client import ContentClient
from camayak_contentapi.responder import WebhookResponder
from camayak_contentapi.router import EventRouter

logger = logging.getLogger(__name__)


async def _handle_webhook(request: Request, router: EventRouter) -> Response:
    start = time.time()
    body = await request.body()

    try:
        payload = json.loads(body) if body else None
    except (ValueError, RecursionError) as e:
        # Routed as an unknown event, the error handler decides the answer
        logger.info(
            "Webhook body is not valid JSON (%d bytes, %s)", len(body), type(e).__name__
        )
        payload = None

    responder = WebhookResponder()
    immediate = await router.receive(payload, responder)
    if immediate is not None:
        return immediate

    response = await responder.wait()
    elapsed_ms = (time.time() - start) * 1000
    logger.debug(
        "Webhook %s resolved with HTTP %d in %.1fms",
        responder.event_id or "unknown",
        response.status_code,
        elapsed_ms,
    )
    return response


def register_webhook_routes(app: FastAPI, router: EventRouter) -> None:
    """Mount the liveness and webhook endpoints on ``app``."""

    @app.get("/")
    @app.get("/webhook/")
    async def ping():
        """Camayak GETs the webhook URL to check it is reachable."""
        return PlainTextResponse("Ok.")

    @app.post("/webhook/")
    async def receive_webhook(request: Request):
        """Receive a Camayak Content API webhook."""
        return await _handle_webhook(request, router)

    logger.info("Webhook routes registered: /, /webhook/")


def create_app(
    router: EventRouter,
    client: ContentClient | None = None,
    shutdown_timeout: float = 10.0,
) -> FastAPI:
    """Build the FastAPI app. ``client`` is closed on shutdown when given.

    Handlers still running ``shutdown_timeout`` seconds into shutdown are
    cancelled, failing their webhooks so Camayak retries them.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await router.drain(timeout=shutdown_timeout)
        if client is not None:
            await client.aclose()

    app = FastAPI(title="Camayak Content API webhook receiver", lifespan=lifespan)
    register_webhook_routes(app, router)
    return app
