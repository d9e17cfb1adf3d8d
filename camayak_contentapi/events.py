"""Inbound Camayak webhook events.

Camayak POSTs ``{"event", "event_id", "resource_uri"}`` to the webhook URL.
Three event types exist:

- validate: reachability check when the destination is configured
- publish: first publish *or* republish of an assignment; which one is
  decided later from the fetched assignment's ``published_id``
- retract: the assignment must be removed from the external system
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class EventType(str, Enum):
    VALIDATE = "validate"
    PUBLISH = "publish"
    RETRACT = "retract"
    UNKNOWN = "unknown"


_KNOWN_EVENTS = {e.value: e for e in EventType if e is not EventType.UNKNOWN}


@dataclass(frozen=True)
class InboundEvent:
    """Parsed webhook body. Lives for one request only."""

    event: EventType
    event_id: str = ""
    resource_uri: str = ""
    raw_event: str = ""


def parse_event(body: Any) -> InboundEvent:
    """Parse a decoded JSON body into an InboundEvent.

    Anything that is not an object with a recognised ``event`` string
    becomes EventType.UNKNOWN.
    """
    if not isinstance(body, dict):
        return InboundEvent(event=EventType.UNKNOWN)

    raw = body.get("event")
    event = _KNOWN_EVENTS.get(raw) if isinstance(raw, str) else None
    resource_uri = body.get("resource_uri")
    event_id = body.get("event_id")

    return InboundEvent(
        event=event or EventType.UNKNOWN,
        event_id="" if event_id is None else str(event_id),
        resource_uri=resource_uri if isinstance(resource_uri, str) else "",
        raw_event=raw if isinstance(raw, str) else "",
    )
