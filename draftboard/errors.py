"""
Error taxonomy for the draft client.

Every failure in the sync and action paths is one of these; none of them
is allowed to stop the polling loop.
"""

from __future__ import annotations


class DraftError(Exception):
    """Base class for all client-side draft failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TransportFailure(DraftError):
    """Network error, non-2xx status, or a body that is not a valid response."""


class DomainRejection(DraftError):
    """The server answered ``ok: false``; ``message`` is its reason, verbatim."""


class ConfigurationError(DraftError):
    """The draft endpoint is not configured; nothing can be fetched."""
