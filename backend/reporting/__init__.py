"""Reporting utilities for dashboard figures."""

from backend.reporting.dashboard import compute_monthly_aggregation, compute_summary, month_label

__all__ = ["compute_monthly_aggregation", "compute_summary", "month_label"]
