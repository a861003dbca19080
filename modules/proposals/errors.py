"""Exceptions raised by the workshop proposals module."""

from __future__ import annotations

__all__ = [
    "ProposalError",
    "MissingRequiredField",
    "StoreWriteFailed",
    "LocalCacheUnavailable",
    "SaveInProgress",
]


class ProposalError(Exception):
    """Base class for proposal errors."""


class MissingRequiredField(ProposalError, ValueError):
    """A proposal is missing a field that must be filled before saving."""

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f"Required field {field!r} is empty")


class StoreWriteFailed(ProposalError):
    """Create, update or delete against the proposal store did not complete."""

    def __init__(self, operation: str, message: str | None = None) -> None:
        self.operation = operation
        super().__init__(message or f"Store {operation} failed")


class LocalCacheUnavailable(ProposalError):
    """The local draft cache could not be read or written."""


class SaveInProgress(ProposalError):
    """A save was requested while another one has not finished."""
