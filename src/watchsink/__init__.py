"""Watchsink - webhook notification sink for watched cluster events.

This package resolves a webhook sink from configuration and environment
variables and POSTs a JSON envelope for every event it is handed,
optionally signing the body with HMAC-SHA256.
"""

__version__ = "0.1.0"
