"""Single-shot response for one inbound webhook.

Camayak keeps the webhook request open until the integration answers:
200 means the assignment was published (the returned ``published_id`` /
``published_url`` are stored by Camayak for later update/retract events),
500 means failure and schedules a retry with increasing backoff.

The responder moves from open to resolved exactly once. Later calls, and
calls after the inbound connection was abandoned, are logged and ignored.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
from collections.abc import Mapping
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

logger = logging.getLogger(__name__)


def serialize_error(error: Any) -> Any:
    """Turn whatever the error handler passed into a JSON-able body."""
    if isinstance(error, (Mapping, list)):
        return jsonable_encoder(error)
    if isinstance(error, BaseException):
        return {"error": str(error) or type(error).__name__}
    if error is None or isinstance(error, (str, int, float, bool)):
        return {"error": error}
    return {"error": str(error)}


class WebhookResponder:
    """Wraps the eventual HTTP response of one webhook request.

    succeed() and fail() may be called from the event loop or from a worker
    thread; off-loop calls block until the loop has applied them.
    """

    def __init__(self, event_id: str = ""):
        self.event_id = event_id
        self._loop = asyncio.get_running_loop()
        self._future: asyncio.Future[Response] = self._loop.create_future()

    @property
    def resolved(self) -> bool:
        return self._future.done()

    @property
    def abandoned(self) -> bool:
        return self._future.cancelled()

    def succeed(self, payload: Mapping[str, Any] | None = None) -> bool:
        """Acknowledge success, optionally echoing published_id / published_url."""
        if payload is None:
            response: Response = Response(status_code=200)
        else:
            response = JSONResponse(jsonable_encoder(payload), status_code=200)
        return self._resolve(response, "succeed")

    def fail(self, error: Any) -> bool:
        """Report failure; Camayak will retry the webhook later."""
        return self._resolve(
            JSONResponse(serialize_error(error), status_code=500), "fail"
        )

    def _resolve(self, response: Response, outcome: str) -> bool:
        try:
            on_loop = asyncio.get_running_loop() is self._loop
        except RuntimeError:
            on_loop = False
        if on_loop:
            return self._resolve_on_loop(response, outcome)

        # Worker thread: resolve on the request's loop and wait for the outcome
        done: concurrent.futures.Future[bool] = concurrent.futures.Future()

        def _apply() -> None:
            done.set_result(self._resolve_on_loop(response, outcome))

        try:
            self._loop.call_soon_threadsafe(_apply)
        except RuntimeError:
            logger.warning(
                "Webhook %s loop is closed, ignoring %s()", self.event_id, outcome
            )
            return False
        return done.result()

    def _resolve_on_loop(self, response: Response, outcome: str) -> bool:
        if self._future.cancelled():
            logger.warning(
                "Webhook %s abandoned by caller, ignoring %s()", self.event_id, outcome
            )
            return False
        if self._future.done():
            logger.warning(
                "Webhook %s already resolved, ignoring %s()", self.event_id, outcome
            )
            return False
        self._future.set_result(response)
        return True

    async def wait(self) -> Response:
        """Wait for succeed()/fail(). Cancelling the waiter abandons the responder."""
        try:
            return await asyncio.shield(self._future)
        except asyncio.CancelledError:
            self._future.cancel()
            raise
