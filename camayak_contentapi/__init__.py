"""Camayak Content API webhook receiver.

Receives Camayak publishing webhooks, fetches the assignment from the
Content API and hands it to your publish / update / retract handlers.
"""

from camayak_contentapi.api import CamayakContentAPI
from camayak_contentapi.client import ContentClient
from camayak_contentapi.config import Credentials, Settings
from camayak_contentapi.errors import (
    ApiError,
    ContentAPIError,
    ParseError,
    StateError,
    TransportError,
    UnknownEventError,
)
from camayak_contentapi.events import EventType, InboundEvent, parse_event
from camayak_contentapi.responder import WebhookResponder
from camayak_contentapi.router import (
    EventRouter,
    WebhookHandlers,
    forward_error,
    noop_handler,
)
from camayak_contentapi.signing import generate_signature, signed_params

__all__ = [
    "ApiError",
    "CamayakContentAPI",
    "ContentAPIError",
    "ContentClient",
    "Credentials",
    "EventRouter",
    "EventType",
    "InboundEvent",
    "ParseError",
    "Settings",
    "StateError",
    "TransportError",
    "UnknownEventError",
    "WebhookHandlers",
    "WebhookResponder",
    "forward_error",
    "generate_signature",
    "noop_handler",
    "parse_event",
    "signed_params",
]
