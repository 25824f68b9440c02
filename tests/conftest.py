"""Shared pytest fixtures for Watchsink tests."""

from __future__ import annotations

import base64
import os

import pytest
import structlog

from watchsink.event import DomainEvent
from watchsink.webhook.resolver import SinkDescriptor

HOOK_URL = "http://example.test/hook"


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep host configuration out of the tests.

    Removes KW_WEBHOOK_* and WATCHSINK_* variables and points the config
    search paths at an empty temporary directory.
    """
    for name in list(os.environ):
        if name.startswith(("KW_WEBHOOK_", "WATCHSINK_")):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def pod_event() -> DomainEvent:
    """Create a namespaced event for a created pod.

    Returns:
        DomainEvent for pod nginx-1 in namespace default.
    """
    return DomainEvent(kind="Pod", name="nginx-1", namespace="default", reason="Created")


@pytest.fixture
def secret_key() -> bytes:
    """Raw HMAC key used by signing tests."""
    return b"secret"


@pytest.fixture
def secret_key_b64(secret_key: bytes) -> str:
    """Base64 form of secret_key, as given in configuration."""
    return base64.b64encode(secret_key).decode()


@pytest.fixture
def unsigned_descriptor() -> SinkDescriptor:
    """Sink without an HMAC key."""
    return SinkDescriptor(url=HOOK_URL)


@pytest.fixture
def signed_descriptor(secret_key: bytes) -> SinkDescriptor:
    """Sink signing with secret_key under the default header."""
    return SinkDescriptor(url=HOOK_URL, hmac_key=secret_key)
