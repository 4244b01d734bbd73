"""Derived dashboard figures computed from a snapshot of transactions.

Nothing here performs I/O; callers pass in whatever ``list_transactions``
returned and may recompute or discard the result freely.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone

from shared.models import MonthlyTotal, Transaction, TransactionSummary


_MONTH_LABELS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


def month_label(value: datetime) -> str:
    """Return the three-letter month abbreviation of a timestamp, in UTC."""

    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return _MONTH_LABELS[value.month - 1]


def compute_monthly_aggregation(records: Iterable[Transaction]) -> list[MonthlyTotal]:
    """Sum amounts per month label, in first-seen order.

    The year is ignored, so January 2023 and January 2024 share one ``Jan``
    bucket. Buckets follow the order in which each label first appears in
    ``records`` rather than calendar order.
    """

    totals: dict[str, float] = {}
    for record in records:
        label = month_label(record.date)
        totals[label] = totals.get(label, 0) + record.amount

    return [MonthlyTotal(month_label=label, total=total) for label, total in totals.items()]


def compute_summary(records: Iterable[Transaction]) -> TransactionSummary:
    """Return total, count and highest amount; all zero for no records."""

    amounts = [record.amount for record in records]
    return TransactionSummary(
        total_spent=sum(amounts, 0),
        transaction_count=len(amounts),
        highest_expense=max(amounts, default=0),
    )
