"""Transaction service: input validation and orchestration over the store.

This is the boundary callers talk to. Every write goes through validation
first; reads are delegated as-is. Callers must re-fetch with
``list_transactions`` after a mutation to observe it, nothing is pushed.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal

from backend.errors import PersistenceError, ServiceError, ValidationError
from backend.reporting import dashboard
from backend.repositories.transactions_repository import TransactionsRepository
from shared.models import (
    DashboardResult,
    MonthlyTotal,
    Transaction,
    TransactionCreateRequest,
    TransactionSummary,
    TransactionUpdateRequest,
)


logger = logging.getLogger(__name__)


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_description(value: object) -> str:
    if _is_blank(value):
        raise ValidationError("description", "is required")
    if not isinstance(value, str):
        raise ValidationError("description", "must be a string")
    return value


def _finite(value: int | float | Decimal, field: str) -> float:
    try:
        converted = float(value)
    except (OverflowError, ValueError) as exc:
        raise ValidationError(field, "must be a finite number") from exc
    if not math.isfinite(converted):
        raise ValidationError(field, "must be a finite number")
    return converted


def parse_amount(value: object) -> float:
    """Coerce a number or numeric string into a float."""

    if _is_blank(value):
        raise ValidationError("amount", "is required")
    if isinstance(value, bool):
        raise ValidationError("amount", "must be a number")
    if isinstance(value, (int, float, Decimal)):
        return _finite(value, "amount")
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError as exc:
            raise ValidationError("amount", "must be a number") from exc
        return _finite(parsed, "amount")
    raise ValidationError("amount", "must be a number")


def require_number(value: object) -> float:
    """Accept only real int/float values; numeric strings are rejected."""

    if value is None:
        raise ValidationError("amount", "is required")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError("amount", "must be a number")
    return _finite(value, "amount")


def parse_date(value: object) -> datetime:
    """Normalize an ISO-8601 string, date or datetime to an aware UTC datetime.

    Naive values are read as UTC, so ``"2024-01-15"`` becomes midnight UTC.
    """

    if _is_blank(value):
        raise ValidationError("date", "is required")

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time())
    elif isinstance(value, str):
        raw_value = value.strip()
        if raw_value[-1] in {"Z", "z"}:
            raw_value = f"{raw_value[:-1]}+00:00"
        try:
            parsed = datetime.fromisoformat(raw_value)
        except ValueError as exc:
            raise ValidationError("date", "must be an ISO-8601 date") from exc
    else:
        raise ValidationError("date", "must be an ISO-8601 date")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError as exc:
        raise ValidationError("date", "is out of range") from exc


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    """Let service errors through and turn anything else into PersistenceError."""

    try:
        yield
    except ServiceError:
        raise
    except Exception as exc:
        raise PersistenceError(f"{operation} failed: {exc}") from exc


@dataclass(slots=True)
class TransactionService:
    repository: TransactionsRepository

    def create_transaction(
        self, description: object, amount: object, date: object
    ) -> Transaction:
        try:
            request = TransactionCreateRequest(
                description=validate_description(description),
                amount=parse_amount(amount),
                date=parse_date(date),
            )
        except ValidationError as exc:
            logger.info("transaction_create_rejected field=%s reason=%s", exc.field, exc.message)
            raise

        with _store_errors("create_transaction"):
            transaction = self.repository.create_transaction(request)
        logger.info("transaction_created id=%s", transaction.id)
        return transaction

    def list_transactions(self) -> list[Transaction]:
        with _store_errors("list_transactions"):
            return self.repository.list_transactions()

    def update_transaction(
        self,
        transaction_id: str,
        description: object,
        amount: object,
        date: object,
    ) -> Transaction:
        try:
            request = TransactionUpdateRequest(
                description=validate_description(description),
                amount=require_number(amount),
                date=parse_date(date),
            )
        except ValidationError as exc:
            logger.info(
                "transaction_update_rejected id=%s field=%s reason=%s",
                transaction_id,
                exc.field,
                exc.message,
            )
            # An unknown id wins over a bad payload.
            with _store_errors("get_transaction"):
                self.repository.get_transaction(transaction_id)
            raise

        with _store_errors("update_transaction"):
            transaction = self.repository.update_transaction(transaction_id, request)
        logger.info("transaction_updated id=%s", transaction.id)
        return transaction

    def delete_transaction(self, transaction_id: str) -> None:
        with _store_errors("delete_transaction"):
            self.repository.delete_transaction(transaction_id)
        logger.info("transaction_deleted id=%s", transaction_id)

    @staticmethod
    def compute_monthly_aggregation(records: Iterable[Transaction]) -> list[MonthlyTotal]:
        return dashboard.compute_monthly_aggregation(records)

    @staticmethod
    def compute_summary(records: Iterable[Transaction]) -> TransactionSummary:
        return dashboard.compute_summary(records)

    def get_dashboard(self) -> DashboardResult:
        """List once and derive every dashboard figure from that snapshot."""

        transactions = self.list_transactions()
        return DashboardResult(
            summary=dashboard.compute_summary(transactions),
            monthly=dashboard.compute_monthly_aggregation(transactions),
            transactions=transactions,
        )
