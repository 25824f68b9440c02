"""Notification envelope posted to the webhook.

Wire format::

    {
      "eventmeta": {"kind": "...", "name": "...", "namespace": "...", "reason": "..."},
      "text": "...",
      "time": "<RFC 3339 timestamp>"
    }
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field
from pydantic_core import PydanticSerializationError

from watchsink.errors import SerializationError
from watchsink.event import DomainEvent


class EventMeta(BaseModel):
    """Identity of the event that triggered the notification."""

    kind: str = Field(..., description="Resource kind")
    name: str = Field(..., description="Resource name")
    namespace: str = Field(..., description="Resource namespace")
    reason: str = Field(..., description="What happened to the resource")


class WebhookMessage(BaseModel):
    """Envelope sent as the request body.

    Attributes:
        eventmeta: Event identity.
        text: Human-readable description of the event.
        time: When the envelope was built.
    """

    eventmeta: EventMeta
    text: str
    time: datetime


def prepare_webhook_message(event: DomainEvent, now: datetime | None = None) -> WebhookMessage:
    """Build the envelope for an event, stamped with the current UTC time."""
    return WebhookMessage(
        eventmeta=EventMeta(
            kind=event.kind,
            name=event.name,
            namespace=event.namespace,
            reason=event.reason,
        ),
        text=event.message(),
        time=now if now is not None else datetime.now(timezone.utc),
    )


def serialize_message(message: WebhookMessage) -> bytes:
    """Encode the envelope as the exact JSON bytes to transmit.

    Raises:
        SerializationError: If the envelope cannot be encoded.
    """
    try:
        return message.model_dump_json().encode("utf-8")
    except (PydanticSerializationError, UnicodeEncodeError) as e:
        raise SerializationError(f"Cannot serialize webhook message: {e}") from e
