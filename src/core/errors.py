# core/errors.py
from __future__ import annotations


class CorruptStateError(Exception):
    """A persisted JSON file exists but could not be read back."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Corrupt state in {path}: {reason}")
        self.path = path
        self.reason = reason


class LookupFailure(Exception):
    """Network, HTTP or decoding failure while querying the lookup service."""


class LookupCancelled(Exception):
    """The lookup noticed its session was superseded and gave up."""
