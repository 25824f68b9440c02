"""Unit tests for HMAC signing."""

from __future__ import annotations

import hashlib
import hmac

from watchsink.webhook.signing import sign_payload, verify_signature


class TestSignPayload:
    """Tests for HMAC-SHA256 signature generation."""

    def test_matches_hmac_sha256(self, secret_key: bytes) -> None:
        data = b'{"eventmeta": {}, "text": "", "time": "2024-02-05T12:00:00Z"}'

        signature = sign_payload(secret_key, data)

        assert signature == hmac.new(secret_key, data, hashlib.sha256).hexdigest()
        assert len(signature) == 64
        assert signature == signature.lower()

    def test_different_keys(self) -> None:
        assert sign_payload(b"k1", b"data") != sign_payload(b"k2", b"data")

    def test_byte_exact(self, secret_key: bytes) -> None:
        """Semantically equal JSON with different bytes signs differently."""
        assert sign_payload(secret_key, b'{"a":1}') != sign_payload(secret_key, b'{"a": 1}')


class TestVerifySignature:
    """Tests for receiver-side verification."""

    def test_valid(self, secret_key: bytes) -> None:
        signature = sign_payload(secret_key, b"body")
        assert verify_signature(secret_key, b"body", signature) is True

    def test_uppercase_accepted(self, secret_key: bytes) -> None:
        signature = sign_payload(secret_key, b"body").upper()
        assert verify_signature(secret_key, b"body", signature) is True

    def test_tampered_body(self, secret_key: bytes) -> None:
        signature = sign_payload(secret_key, b"body")
        assert verify_signature(secret_key, b"body!", signature) is False

    def test_wrong_key(self, secret_key: bytes) -> None:
        signature = sign_payload(b"other", b"body")
        assert verify_signature(secret_key, b"body", signature) is False

    def test_garbage_signature(self, secret_key: bytes) -> None:
        assert verify_signature(secret_key, b"body", "not-a-signature") is False
