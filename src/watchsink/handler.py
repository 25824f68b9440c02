"""Notification handler interface shared by all sinks.

The watch pipeline initializes every configured handler once with the
root configuration and then calls ``handle`` for each event. A handler
must not let per-event failures escape ``handle``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from watchsink.config import WatchsinkConfig
from watchsink.errors import ConfigError
from watchsink.event import DomainEvent
from watchsink.webhook.dispatcher import WebhookDispatcher
from watchsink.webhook.resolver import SinkDescriptor, resolve_sink


@runtime_checkable
class Handler(Protocol):
    """Protocol every notification sink implements."""

    def init(self, config: WatchsinkConfig) -> None:
        """Prepare the sink; raise ConfigError if it cannot be used."""
        ...

    def handle(self, event: DomainEvent) -> None:
        """Deliver one event. Must not raise for delivery failures."""
        ...


class Webhook:
    """Handler that notifies a webhook endpoint.

    Example:
        >>> handler = Webhook()
        >>> handler.init(load_config())
        >>> handler.handle(DomainEvent(kind="Pod", name="nginx-1",
        ...                            namespace="default", reason="Created"))
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ
        self._dispatcher: WebhookDispatcher | None = None

    @property
    def descriptor(self) -> SinkDescriptor | None:
        """The resolved sink, or None before init."""
        return self._dispatcher.descriptor if self._dispatcher else None

    def init(self, config: WatchsinkConfig) -> None:
        """Resolve the webhook sink.

        Raises:
            ConfigError: If the URL is missing or the HMAC key is malformed.
        """
        descriptor = resolve_sink(config.handler.webhook, self._environ)
        if self._dispatcher is not None:
            self._dispatcher.close()
        self._dispatcher = WebhookDispatcher(descriptor)

    def handle(self, event: DomainEvent) -> None:
        """Send the event; the delivery result is intentionally discarded.

        Raises:
            ConfigError: If called before init.
        """
        if self._dispatcher is None:
            raise ConfigError("Webhook handler used before init")
        self._dispatcher.handle(event)

    def close(self) -> None:
        """Release the underlying HTTP client."""
        if self._dispatcher is not None:
            self._dispatcher.close()
