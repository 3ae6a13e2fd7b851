# src/core/errors.py — v1
"""Structured errors for faults that must reach the caller.

Expected degraded conditions (store unreachable, write failed, hash
primitive missing) are logged and absorbed by the tracker. These types
exist so stores and hash providers can tell the tracker which case it is.
"""

from __future__ import annotations


class RegenerationError(Exception):
    """Base class for change-tracking errors."""


class StoreUnavailable(RegenerationError):
    """Fingerprint store could not be opened, read or written."""


class CorruptRecord(RegenerationError):
    """Persisted fingerprint data is malformed."""

    def __init__(self, message: str, category: str | None = None) -> None:
        super().__init__(message)
        self.category = category


class HashFailure(RegenerationError):
    """No hash provider could digest the canonical configuration."""
