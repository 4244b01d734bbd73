"""Error kinds raised by the transaction store and service."""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for errors surfaced to service callers."""


class ValidationError(ServiceError):
    """Raised when an input field is missing or invalid."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class NotFoundError(ServiceError):
    """Raised when no transaction has the requested id."""

    def __init__(self, transaction_id: str) -> None:
        super().__init__(f"Transaction not found: {transaction_id}")
        self.transaction_id = transaction_id


class PersistenceError(ServiceError):
    """Raised when the underlying storage is unreachable or fails."""
