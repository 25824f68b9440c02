"""Webhook dispatcher for watched-event notifications.

This module delivers one notification per event to a resolved webhook sink:
- Builds a JSON envelope from the event and the current time
- Signs the exact body bytes with HMAC-SHA256 when a key is configured
- Sends a single synchronous POST, without retries

Delivery is fire-and-forget. Serialization and transport failures are
logged and returned in a DispatchResult; they never propagate into the
watch loop. The HTTP status code is recorded but does not decide success,
so a non-2xx answer still counts as delivered.

Example:
    descriptor = resolve_sink(config.handler.webhook)
    with WebhookDispatcher(descriptor) as dispatcher:
        dispatcher.handle(event)
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import httpx

from watchsink.errors import SerializationError, TransportError, WatchsinkError
from watchsink.event import DomainEvent
from watchsink.logging import event_context, get_logger
from watchsink.webhook.message import (
    WebhookMessage,
    prepare_webhook_message,
    serialize_message,
)
from watchsink.webhook.resolver import SinkDescriptor
from watchsink.webhook.signing import sign_payload


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of a single delivery attempt.

    Attributes:
        url: Endpoint the notification was addressed to.
        ok: True when the request was sent and a response received.
        sent_at: When the response was received (None on failure).
        status_code: HTTP status of the response, if any.
        error: The error that aborted the delivery, if any.
    """

    url: str
    ok: bool
    sent_at: datetime | None = None
    status_code: int | None = None
    error: WatchsinkError | None = None


class WebhookDispatcher:
    """Posts notification envelopes to a single webhook sink.

    The descriptor is read-only, so one dispatcher may be shared by
    concurrent callers. The HTTP client is created lazily and reused.

    Attributes:
        descriptor: The resolved sink.
        logger: Structured logger for this dispatcher.
    """

    def __init__(
        self,
        descriptor: SinkDescriptor,
        client: httpx.Client | None = None,
        logger: Any | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            descriptor: Resolved sink to deliver to.
            client: Optional HTTP client. A caller-supplied client is not
                   closed by close().
            logger: Optional structlog-style logger; defaults to the
                   module logger.
        """
        self.descriptor = descriptor
        base_logger = logger if logger is not None else get_logger(__name__)
        self.logger = base_logger.bind(component="webhook_dispatcher")
        self._client = client
        self._owns_client = client is None
        self._client_lock = threading.Lock()

    def _get_client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        with self._client_lock:
            if self._client is None or self._client.is_closed:
                self._client = httpx.Client(timeout=self.descriptor.timeout_seconds)
                self._owns_client = True
            return self._client

    def close(self) -> None:
        """Close the HTTP client if this dispatcher created it."""
        with self._client_lock:
            if self._owns_client and self._client is not None and not self._client.is_closed:
                self._client.close()
            self._client = None

    def __enter__(self) -> WebhookDispatcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _build_headers(self, body: bytes) -> dict[str, str]:
        """Build HTTP headers, adding the signature when a key is configured."""
        headers = {"Content-Type": "application/json"}
        if self.descriptor.hmac_key:
            headers[self.descriptor.hmac_signature_header] = sign_payload(
                self.descriptor.hmac_key, body
            )
        return headers

    def _send(self, body: bytes) -> httpx.Response:
        """Build and send the POST request.

        Raises:
            TransportError: If the request cannot be built or sent.
        """
        client = self._get_client()
        try:
            request = client.build_request(
                "POST",
                self.descriptor.url,
                content=body,
                headers=self._build_headers(body),
            )
            return client.send(request)
        # header values and names must encode as ASCII
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as e:
            raise TransportError(f"POST {self.descriptor.url} failed: {e}") from e

    def post_message(self, message: WebhookMessage) -> DispatchResult:
        """Serialize, sign, and send a message once.

        Args:
            message: Envelope to deliver.

        Returns:
            DispatchResult describing the outcome. Never raises for
            serialization or transport failures.
        """
        url = self.descriptor.url
        try:
            body = serialize_message(message)
            response = self._send(body)
        except (SerializationError, TransportError) as e:
            return DispatchResult(url=url, ok=False, error=e)

        return DispatchResult(
            url=url,
            ok=True,
            sent_at=datetime.now(timezone.utc),
            status_code=response.status_code,
        )

    def handle(self, event: DomainEvent) -> DispatchResult:
        """Notify the sink about an event.

        Failures are logged and returned; callers are free to ignore the
        result.

        Args:
            event: The watched event.

        Returns:
            DispatchResult for the single delivery attempt.
        """
        with event_context(kind=event.kind, name=event.name, namespace=event.namespace):
            message = prepare_webhook_message(event)
            result = self.post_message(message)

            if not result.ok:
                self.logger.error("webhook_send_failed", url=result.url, error=str(result.error))
                return result

            self.logger.info(
                "webhook_sent",
                url=result.url,
                sent_at=result.sent_at.isoformat() if result.sent_at else None,
                status_code=result.status_code,
            )
            return result


def handle(descriptor: SinkDescriptor, event: DomainEvent) -> DispatchResult:
    """Deliver one event with a short-lived dispatcher."""
    with WebhookDispatcher(descriptor) as dispatcher:
        return dispatcher.handle(event)
