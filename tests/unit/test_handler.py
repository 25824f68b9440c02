"""Unit tests for the Webhook handler."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from watchsink.config import HandlerConfig, WatchsinkConfig, WebhookConfig
from watchsink.errors import ConfigError
from watchsink.event import DomainEvent
from watchsink.handler import Handler, Webhook


def _config(**webhook: str) -> WatchsinkConfig:
    return WatchsinkConfig(handler=HandlerConfig(webhook=WebhookConfig(**webhook)))


def test_implements_handler_protocol() -> None:
    assert isinstance(Webhook(), Handler)


def test_init_resolves_descriptor(secret_key_b64: str) -> None:
    handler = Webhook(environ={"KW_WEBHOOK_HMAC_KEY": secret_key_b64})
    handler.init(_config(url="http://example.test/hook"))

    assert handler.descriptor is not None
    assert handler.descriptor.url == "http://example.test/hook"
    assert handler.descriptor.hmac_key == b"secret"
    handler.close()


def test_init_missing_url() -> None:
    handler = Webhook(environ={})
    with pytest.raises(ConfigError, match="Missing Webhook url"):
        handler.init(_config())
    assert handler.descriptor is None


def test_handle_before_init(pod_event: DomainEvent) -> None:
    with pytest.raises(ConfigError, match="before init"):
        Webhook().handle(pod_event)


def test_handle_delegates_and_discards_result(pod_event: DomainEvent) -> None:
    handler = Webhook(environ={"KW_WEBHOOK_URL": "http://example.test/hook"})
    handler.init(_config())

    with patch(
        "watchsink.handler.WebhookDispatcher.handle",
        return_value=MagicMock(ok=False),
    ) as mock_handle:
        assert handler.handle(pod_event) is None

    mock_handle.assert_called_once_with(pod_event)
    handler.close()
