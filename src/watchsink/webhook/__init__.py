"""Webhook notification sink.

Resolves the sink once from configuration and the KW_WEBHOOK_* environment
variables, then POSTs a JSON envelope per event, optionally signed with
HMAC-SHA256.
"""

from __future__ import annotations

from watchsink.webhook.dispatcher import DispatchResult, WebhookDispatcher, handle
from watchsink.webhook.message import (
    EventMeta,
    WebhookMessage,
    prepare_webhook_message,
    serialize_message,
)
from watchsink.webhook.resolver import (
    DEFAULT_HMAC_SIGNATURE_HEADER,
    SinkDescriptor,
    first_non_empty,
    resolve_sink,
)
from watchsink.webhook.signing import sign_payload, verify_signature

__all__ = [
    # Resolution
    "DEFAULT_HMAC_SIGNATURE_HEADER",
    "SinkDescriptor",
    "first_non_empty",
    "resolve_sink",
    # Envelope
    "EventMeta",
    "WebhookMessage",
    "prepare_webhook_message",
    "serialize_message",
    # Signing
    "sign_payload",
    "verify_signature",
    # Dispatch
    "DispatchResult",
    "WebhookDispatcher",
    "handle",
]
