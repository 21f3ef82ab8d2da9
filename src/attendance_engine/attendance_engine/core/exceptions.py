from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class StoreUnavailableError(DomainError):
    """Raised when the record store cannot be reached."""


class BackfillAbortedError(DomainError):
    """Raised when a reconciliation batch could not be committed."""

    def __init__(self, message: str, *, batch_number: int | None = None):
        super().__init__(message)
        self.batch_number = batch_number
