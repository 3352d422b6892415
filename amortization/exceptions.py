"""Exception hierarchy for the amortization engine.

Generator-side errors (``InvalidRate``, ``InvalidTerm``, ``InvalidBalance``)
are raised before anything is written to the store. Store-side errors wrap
lookups, uniqueness and schema problems; ``StorageFailure`` wraps any
underlying SQLAlchemy error and is always surfaced, never retried.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class AmortizationError(Exception):
    """Base exception for all amortization errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class GenerationError(AmortizationError):
    """Raised when a loan definition cannot produce a schedule."""


class InvalidRate(GenerationError):
    """Raised for a negative APR or a non-positive rate divisor."""


class InvalidTerm(GenerationError):
    """Raised for a non-positive term or period count."""


class InvalidBalance(GenerationError):
    """Raised when the principal balance is not positive."""


class StoreError(AmortizationError):
    """Base class for persistence errors."""


class DuplicateLoan(StoreError):
    """Raised when a loan with the same name already exists."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Loan '{name}' already exists", {"name": name})


class NotFound(StoreError):
    """Raised when a loan or its schedule cannot be found."""

    def __init__(self, name: str, what: str = "Loan") -> None:
        super().__init__(f"{what} '{name}' not found", {"name": name})


class SchemaNotInitialized(StoreError):
    """Raised when the database has not been initialised with ``init``."""


class StorageFailure(StoreError):
    """Raised when the underlying database operation fails."""
