from __future__ import annotations


class SwitchplusError(Exception):
    """Base class for errors raised inside the arcade core."""


class StorageError(SwitchplusError):
    """Raised when a key-value store read or write fails."""
