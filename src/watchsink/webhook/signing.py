"""HMAC-SHA256 signatures over webhook bodies."""

from __future__ import annotations

import hashlib
import hmac


def sign_payload(key: bytes, data: bytes) -> str:
    """Return the lowercase hex HMAC-SHA256 of data under key.

    The signature must be computed over the same bytes that are sent;
    never re-serialize the message between signing and sending.
    """
    return hmac.new(key, data, hashlib.sha256).hexdigest()


def verify_signature(key: bytes, data: bytes, signature: str) -> bool:
    """Check a received signature in constant time.

    Intended for receivers validating a request body against the header
    value sent by the dispatcher.
    """
    expected = sign_payload(key, data).encode("ascii")
    return hmac.compare_digest(expected, signature.strip().lower().encode("utf-8"))
