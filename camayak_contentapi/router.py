"""Webhook event router — classifies Camayak events and dispatches handlers.

Per request:
  Received -> Classified -> (Validating | Fetching) -> Dispatched

- validate answers "pong" immediately, no fetch, no handler
- publish/retract fetch the assignment from ``resource_uri`` then route on
  the assignment's ``published_id``:

    publish + published_id      -> update
    publish, no published_id    -> publish
    retract + published_id      -> retract
    retract, no published_id    -> error ("Unexpected Error")

- anything else goes straight to the error handler

Handlers receive (responder, content) and must eventually call
``responder.succeed`` or ``responder.fail``. The router never waits for
them. The error handler receives (error, responder).
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Union

from fastapi.responses import PlainTextResponse, Response

from camayak_contentapi.client import ContentClient
from camayak_contentapi.errors import (
    ContentAPIError,
    ParseError,
    StateError,
    UnknownEventError,
)
from camayak_contentapi.events import EventType, InboundEvent, parse_event
from camayak_contentapi.responder import WebhookResponder

logger = logging.getLogger(__name__)

HANDLER_CANCELLED_MESSAGE = "Handler cancelled"

Content = dict[str, Any]
ContentHandler = Callable[[WebhookResponder, Content], Union[None, Awaitable[None]]]
ErrorHandler = Callable[[Any, WebhookResponder], Union[None, Awaitable[None]]]


def noop_handler(responder: WebhookResponder, content: Content) -> None:
    """Placeholder that acknowledges every event. Not for production use."""
    responder.succeed()


def forward_error(error: Any, responder: WebhookResponder) -> None:
    """Default error handler: report failure so Camayak retries."""
    responder.fail(error)


@dataclass(frozen=True)
class WebhookHandlers:
    """The four integration hooks. Omitted hooks fall back to the defaults."""

    publish: ContentHandler = noop_handler
    update: ContentHandler = noop_handler
    retract: ContentHandler = noop_handler
    error: ErrorHandler = forward_error

    @classmethod
    def build(
        cls,
        publish: ContentHandler | None = None,
        update: ContentHandler | None = None,
        retract: ContentHandler | None = None,
        error: ErrorHandler | None = None,
    ) -> WebhookHandlers:
        return cls(
            publish=publish or noop_handler,
            update=update or noop_handler,
            retract=retract or noop_handler,
            error=error or forward_error,
        )


def _audit(event: InboundEvent, status: str) -> None:
    logger.info(
        "WEBHOOK_AUDIT event=%s id=%s status=%s",
        event.raw_event or "unknown",
        event.event_id or "unknown",
        status,
    )


class EventRouter:
    """Classifies inbound events and invokes the matching handler."""

    def __init__(self, client: ContentClient, handlers: WebhookHandlers | None = None):
        self._client = client
        self._handlers = handlers or WebhookHandlers()
        # Strong refs so scheduled handler coroutines are not GC'd mid-flight
        self._pending: set[asyncio.Task] = set()

    @property
    def handlers(self) -> WebhookHandlers:
        return self._handlers

    async def receive(self, body: Any, responder: WebhookResponder) -> Response | None:
        """Handle one decoded webhook body.

        Returns a response to send immediately (validate only). Otherwise
        returns None and the transport waits on ``responder``.
        """
        event = parse_event(body)
        responder.event_id = event.event_id

        if event.event is EventType.VALIDATE:
            _audit(event, "validated")
            return PlainTextResponse("pong", status_code=200)

        try:
            action, content = await self._classify(event)
        except ContentAPIError as e:
            _audit(event, f"error:{type(e).__name__}")
            self._invoke(self._handlers.error, (e.detail, responder), responder)
            return None

        _audit(event, f"dispatched:{action}")
        handler = getattr(self._handlers, action)
        self._invoke(handler, (responder, content), responder)
        return None

    async def _classify(self, event: InboundEvent) -> tuple[str, Content]:
        """Fetch the assignment and pick publish, update or retract."""
        if event.event is EventType.UNKNOWN:
            raise UnknownEventError()
        if not event.resource_uri:
            raise UnknownEventError("Missing resource_uri")

        body = await self._client.fetch(event.resource_uri)
        try:
            content = json.loads(body)
        except (ValueError, RecursionError) as e:
            raise ParseError() from e
        if not isinstance(content, dict):
            raise ParseError()

        # Any truthy published_id means "already published"
        published = bool(content.get("published_id"))

        if event.event is EventType.PUBLISH:
            return ("update" if published else "publish"), content
        if published:
            return "retract", content
        raise StateError()

    def _invoke(
        self,
        fn: Callable[..., Any],
        args: tuple[Any, ...],
        responder: WebhookResponder,
    ) -> None:
        try:
            result = fn(*args)
        except Exception as e:
            self._crashed(fn, e, responder)
            return

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._pending.add(task)
            task.add_done_callback(lambda t: self._finished(fn, t, responder))

    def _finished(
        self, fn: Callable[..., Any], task: asyncio.Future, responder: WebhookResponder
    ) -> None:
        self._pending.discard(task)
        if task.cancelled():
            logger.warning(
                "Webhook handler %s cancelled for event %s",
                getattr(fn, "__name__", repr(fn)),
                responder.event_id or "unknown",
            )
            if not responder.resolved:
                responder.fail(HANDLER_CANCELLED_MESSAGE)
            return
        exc = task.exception()
        if exc is not None:
            self._crashed(fn, exc, responder)

    def _crashed(
        self, fn: Callable[..., Any], exc: BaseException, responder: WebhookResponder
    ) -> None:
        logger.error(
            "Webhook handler %s raised for event %s",
            getattr(fn, "__name__", repr(fn)),
            responder.event_id or "unknown",
            exc_info=exc,
        )
        if not responder.resolved:
            responder.fail(exc)

    async def drain(self, timeout: float | None = None) -> None:
        """Wait for in-flight handler coroutines (used on shutdown and in tests).

        Handlers still running after ``timeout`` seconds are cancelled and
        their webhooks fail with "Handler cancelled".
        """
        if not self._pending:
            return
        _, still_running = await asyncio.wait(set(self._pending), timeout=timeout)
        if not still_running:
            return
        logger.warning("Cancelling %d webhook handler(s) at shutdown", len(still_running))
        for task in still_running:
            task.cancel()
        await asyncio.wait(still_running)
