"""Pydantic contracts shared across the store, the service and the HTTP API."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Transaction(BaseModel):
    """A stored transaction record."""

    model_config = ConfigDict(extra="forbid")

    id: str
    description: str
    amount: float
    date: datetime


class TransactionCreateRequest(BaseModel):
    """Validated fields handed to the store for a new record."""

    model_config = ConfigDict(extra="forbid")

    description: str
    amount: float
    date: datetime


class TransactionUpdateRequest(BaseModel):
    """Validated replacement fields for an existing record."""

    model_config = ConfigDict(extra="forbid")

    description: str
    amount: float
    date: datetime


class TransactionPayload(BaseModel):
    """Raw request body accepted by the create and update endpoints.

    Fields are left untyped so the service, not the HTTP layer, decides what is
    valid; the edit form posts the whole record back, so unknown keys such as
    ``id`` are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    description: Any = None
    amount: Any = None
    date: Any = None


class MonthlyTotal(BaseModel):
    model_config = ConfigDict(extra="forbid")

    month_label: str
    total: float


class TransactionSummary(BaseModel):
    model_config = ConfigDict(extra="forbid")

    total_spent: float = 0
    transaction_count: int = 0
    highest_expense: float = 0


class DashboardResult(BaseModel):
    """Everything the dashboard renders, computed from one listing snapshot."""

    model_config = ConfigDict(extra="forbid")

    summary: TransactionSummary
    monthly: list[MonthlyTotal] = Field(default_factory=list)
    transactions: list[Transaction] = Field(default_factory=list)
