"""Exception hierarchy for Watchsink."""

from __future__ import annotations


class WatchsinkError(Exception):
    """Base class for all Watchsink errors."""


class ConfigError(WatchsinkError):
    """The sink cannot be configured.

    Raised at startup for a missing webhook URL, a malformed HMAC key, or an
    invalid configuration file. Callers must not activate the sink.
    """


class SerializationError(WatchsinkError):
    """A notification envelope could not be encoded to JSON."""


class TransportError(WatchsinkError):
    """The HTTP request could not be built or sent."""
