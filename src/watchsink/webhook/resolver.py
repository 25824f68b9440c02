"""Resolve a webhook sink from explicit configuration and the environment.

Each field is taken from the first non-empty source, in order:

    url                     config.url -> KW_WEBHOOK_URL
    hmac key (base64)       config.hmac_key -> KW_WEBHOOK_HMAC_KEY
    signature header        config.hmac_signature_header
                            -> KW_WEBHOOK_HMAC_SIGNATURE_HEADER
                            -> "X-KubeWatch-Signature"

Resolution happens once at startup. The resulting SinkDescriptor is
immutable and shared read-only by every dispatch.
"""

from __future__ import annotations

import base64
import binascii
import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from watchsink.config import WebhookConfig
from watchsink.errors import ConfigError

ENV_WEBHOOK_URL = "KW_WEBHOOK_URL"
ENV_WEBHOOK_HMAC_KEY = "KW_WEBHOOK_HMAC_KEY"
ENV_WEBHOOK_HMAC_SIGNATURE_HEADER = "KW_WEBHOOK_HMAC_SIGNATURE_HEADER"

DEFAULT_HMAC_SIGNATURE_HEADER = "X-KubeWatch-Signature"

MISSING_URL_MESSAGE = """
{reason}

You need to set Webhook url
using "--url/-u" or using environment variables:

export KW_WEBHOOK_URL=webhook_url

Command line flags will override environment variables
"""


@dataclass(frozen=True)
class SinkDescriptor:
    """A resolved, validated webhook sink.

    Attributes:
        url: Endpoint receiving the notifications. Never empty.
        hmac_key: Decoded HMAC key, or None when signing is disabled.
        hmac_signature_header: Header name carrying the signature.
        timeout_seconds: Request timeout; None waits indefinitely.
    """

    url: str
    hmac_key: bytes | None = field(default=None, repr=False)
    hmac_signature_header: str = DEFAULT_HMAC_SIGNATURE_HEADER
    timeout_seconds: float | None = None

    @property
    def signing_enabled(self) -> bool:
        """Whether dispatched requests carry a signature header."""
        return bool(self.hmac_key)


def first_non_empty(*candidates: str | None) -> str | None:
    """Return the first candidate that is neither None nor empty.

    Example:
        >>> first_non_empty("", None, "env-value", "default")
        'env-value'
    """
    for candidate in candidates:
        if candidate:
            return candidate
    return None


def decode_hmac_key(encoded: str) -> bytes:
    """Decode a standard base64 HMAC key.

    Raises:
        ConfigError: If the value is not valid base64.
    """
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ConfigError(f"Invalid base64 HMAC key: {e}") from e


def resolve_signature_header(
    config: WebhookConfig, environ: Mapping[str, str] | None = None
) -> str:
    """Resolve the signature header name, defaulting to X-KubeWatch-Signature."""
    env = os.environ if environ is None else environ
    header = first_non_empty(
        config.hmac_signature_header,
        env.get(ENV_WEBHOOK_HMAC_SIGNATURE_HEADER),
    )
    return header or DEFAULT_HMAC_SIGNATURE_HEADER


def resolve_sink(
    config: WebhookConfig, environ: Mapping[str, str] | None = None
) -> SinkDescriptor:
    """Build a SinkDescriptor from configuration with environment fallbacks.

    Reads environment variables only; performs no network or disk access.

    Args:
        config: Explicit webhook configuration (file or command line).
        environ: Environment mapping; defaults to os.environ.

    Returns:
        The resolved sink.

    Raises:
        ConfigError: If the HMAC key is not valid base64 or no URL is set.
    """
    env = os.environ if environ is None else environ

    url = first_non_empty(config.url, env.get(ENV_WEBHOOK_URL))
    encoded_key = first_non_empty(config.hmac_key, env.get(ENV_WEBHOOK_HMAC_KEY))
    header = resolve_signature_header(config, env)

    hmac_key = decode_hmac_key(encoded_key) if encoded_key else None

    if not url:
        raise ConfigError(MISSING_URL_MESSAGE.format(reason="Missing Webhook url"))

    return SinkDescriptor(
        url=url,
        hmac_key=hmac_key,
        hmac_signature_header=header,
        timeout_seconds=config.timeout_seconds,
    )
