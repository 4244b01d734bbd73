"""Transactions repository adapters.

The store owns id assignment and persistence only; inputs are expected to be
validated by the service layer before they get here.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Protocol
from uuid import UUID, uuid4

from backend.db.supabase_client import SupabaseClient
from backend.errors import NotFoundError, PersistenceError
from shared.models import Transaction, TransactionCreateRequest, TransactionUpdateRequest


logger = logging.getLogger(__name__)


_SELECT_COLUMNS = "id,description,amount,date"


class TransactionsRepository(Protocol):
    def create_transaction(self, request: TransactionCreateRequest) -> Transaction:
        """Persist a new record under a freshly assigned id and return it."""

    def list_transactions(self) -> list[Transaction]:
        """Return every record, most recent date first."""

    def get_transaction(self, transaction_id: str) -> Transaction:
        """Return the record with the given id."""

    def update_transaction(
        self, transaction_id: str, request: TransactionUpdateRequest
    ) -> Transaction:
        """Replace description, amount and date of a record and return it."""

    def delete_transaction(self, transaction_id: str) -> None:
        """Remove the record with the given id."""


def _sort_by_date_desc(transactions: list[Transaction]) -> list[Transaction]:
    # sorted() is stable with reverse=True, so equal dates keep insertion order.
    return sorted(transactions, key=lambda transaction: transaction.date, reverse=True)


class InMemoryTransactionsRepository:
    """In-memory transactions repository used by tests/dev."""

    def __init__(self, transactions: list[Transaction] | None = None) -> None:
        self._transactions: list[Transaction] = list(transactions or [])
        self._lock = Lock()

    def create_transaction(self, request: TransactionCreateRequest) -> Transaction:
        transaction = Transaction(
            id=str(uuid4()),
            description=request.description,
            amount=request.amount,
            date=request.date,
        )
        with self._lock:
            self._transactions.append(transaction)
        return transaction

    def list_transactions(self) -> list[Transaction]:
        with self._lock:
            snapshot = list(self._transactions)
        return _sort_by_date_desc(snapshot)

    def get_transaction(self, transaction_id: str) -> Transaction:
        with self._lock:
            for transaction in self._transactions:
                if transaction.id == transaction_id:
                    return transaction
        raise NotFoundError(transaction_id)

    def update_transaction(
        self, transaction_id: str, request: TransactionUpdateRequest
    ) -> Transaction:
        with self._lock:
            for index, transaction in enumerate(self._transactions):
                if transaction.id != transaction_id:
                    continue

                updated = transaction.model_copy(
                    update={
                        "description": request.description,
                        "amount": request.amount,
                        "date": request.date,
                    }
                )
                self._transactions[index] = updated
                return updated

        raise NotFoundError(transaction_id)

    def delete_transaction(self, transaction_id: str) -> None:
        with self._lock:
            kept = [
                transaction
                for transaction in self._transactions
                if transaction.id != transaction_id
            ]
            if len(kept) == len(self._transactions):
                raise NotFoundError(transaction_id)
            self._transactions = kept


class SupabaseTransactionsRepository:
    """Supabase-backed transactions repository over a PostgREST table."""

    def __init__(self, client: SupabaseClient, table: str = "transactions") -> None:
        self._client = client
        self._table = table

    @staticmethod
    def _row_id(transaction_id: str) -> str:
        """Return the canonical uuid text, or raise NotFoundError for anything else."""
        try:
            return str(UUID(str(transaction_id)))
        except ValueError as exc:
            raise NotFoundError(transaction_id) from exc

    @staticmethod
    def _serialize(request: TransactionCreateRequest | TransactionUpdateRequest) -> dict[str, object]:
        return {
            "description": request.description,
            "amount": request.amount,
            "date": request.date.isoformat(),
        }

    @staticmethod
    def _parse_row(row: dict[str, object]) -> Transaction:
        return Transaction.model_validate(
            {
                "id": str(row.get("id")),
                "description": row.get("description"),
                "amount": row.get("amount"),
                "date": row.get("date"),
            }
        )

    def create_transaction(self, request: TransactionCreateRequest) -> Transaction:
        try:
            rows = self._client.post_rows(
                table=self._table,
                payload=self._serialize(request),
                query={"select": _SELECT_COLUMNS},
            )
        except (RuntimeError, ValueError) as exc:
            raise PersistenceError(str(exc)) from exc

        if not rows:
            raise PersistenceError("Supabase did not return created transaction")
        return self._parse_row(rows[0])

    def list_transactions(self) -> list[Transaction]:
        try:
            rows, _ = self._client.get_rows(
                table=self._table,
                query=[
                    ("select", _SELECT_COLUMNS),
                    ("order", "date.desc,created_at.asc"),
                ],
                with_count=False,
            )
        except (RuntimeError, ValueError) as exc:
            raise PersistenceError(str(exc)) from exc
        return [self._parse_row(row) for row in rows]

    def get_transaction(self, transaction_id: str) -> Transaction:
        row_id = self._row_id(transaction_id)
        try:
            rows, _ = self._client.get_rows(
                table=self._table,
                query={"select": _SELECT_COLUMNS, "id": f"eq.{row_id}", "limit": 1},
                with_count=False,
            )
        except (RuntimeError, ValueError) as exc:
            raise PersistenceError(str(exc)) from exc

        if not rows:
            raise NotFoundError(transaction_id)
        return self._parse_row(rows[0])

    def update_transaction(
        self, transaction_id: str, request: TransactionUpdateRequest
    ) -> Transaction:
        row_id = self._row_id(transaction_id)
        try:
            rows = self._client.patch_rows(
                table=self._table,
                query={"id": f"eq.{row_id}", "select": _SELECT_COLUMNS},
                payload=self._serialize(request),
            )
        except (RuntimeError, ValueError) as exc:
            raise PersistenceError(str(exc)) from exc

        if not rows:
            raise NotFoundError(transaction_id)
        return self._parse_row(rows[0])

    def delete_transaction(self, transaction_id: str) -> None:
        row_id = self._row_id(transaction_id)
        try:
            rows = self._client.delete_rows(
                table=self._table,
                query={"id": f"eq.{row_id}", "select": "id"},
            )
        except (RuntimeError, ValueError) as exc:
            raise PersistenceError(str(exc)) from exc

        if not rows:
            raise NotFoundError(transaction_id)
        logger.debug("supabase_transaction_deleted table=%s id=%s", self._table, transaction_id)
