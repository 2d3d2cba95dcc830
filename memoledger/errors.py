"""Mini README: Error hierarchy shared by the ledger components.

Every error carries the HTTP status the web interface reports for it, so the
FastAPI layer can translate failures with a single exception handler.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for failures surfaced to ledger callers."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    """Required input is missing or malformed."""

    status_code = 400


class InvalidArgumentError(LedgerError):
    """Input is well-formed but semantically empty or out of range."""

    status_code = 400


class NotFoundError(LedgerError):
    """The targeted memo does not exist."""

    status_code = 404


class StorageError(LedgerError):
    """The underlying database is unavailable or rejected the operation."""

    status_code = 503


__all__ = [
    "InvalidArgumentError",
    "LedgerError",
    "NotFoundError",
    "StorageError",
    "ValidationError",
]
