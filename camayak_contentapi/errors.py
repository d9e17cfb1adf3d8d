"""Content API error taxonomy.

Every failure the bridge can hit while handling a webhook is one of these.
ContentClient raises them; EventRouter catches them and hands ``detail``
to the configured error handler, so nothing reaches the HTTP layer.
"""

from __future__ import annotations

from typing import Any

UNKNOWN_EVENT_MESSAGE = "Unknown event type"
PARSE_ERROR_MESSAGE = "Unable to parse content api response"
UNEXPECTED_STATE_MESSAGE = "Unexpected Error"


class ContentAPIError(Exception):
    """Base class. ``detail`` is what the error handler receives."""

    def __init__(self, message: str, detail: Any = None):
        super().__init__(message)
        self.detail = message if detail is None else detail


class TransportError(ContentAPIError):
    """Network-level failure reaching the Content API."""

    def __init__(self, cause: BaseException):
        super().__init__(f"Content API unreachable: {cause}", detail=cause)
        self.cause = cause


class ApiError(ContentAPIError):
    """Content API answered with a status outside [200, 300)."""

    def __init__(self, status_code: int, body: str = ""):
        super().__init__(f"Content API returned HTTP {status_code}", detail=status_code)
        self.status_code = status_code
        self.body = body


class ParseError(ContentAPIError):
    def __init__(self, message: str = PARSE_ERROR_MESSAGE):
        super().__init__(message)


class UnknownEventError(ContentAPIError):
    def __init__(self, message: str = UNKNOWN_EVENT_MESSAGE):
        super().__init__(message)


class StateError(ContentAPIError):
    """Event is not a valid transition for the assignment (e.g. retract before publish)."""

    def __init__(self, message: str = UNEXPECTED_STATE_MESSAGE):
        super().__init__(message)
