"""Aggregations backing the calendar, monthly and spending views."""

from backend.reporting.aggregation import (
    UNCATEGORIZED_COLOR,
    UNCATEGORIZED_LABEL,
    aggregate_by_category,
    aggregate_by_day,
    calendar_days,
    month_bounds,
    summarize_results,
    totals_for_month,
    totals_in_range,
    transactions_in_month,
)

__all__ = [
    "UNCATEGORIZED_COLOR",
    "UNCATEGORIZED_LABEL",
    "aggregate_by_category",
    "aggregate_by_day",
    "calendar_days",
    "month_bounds",
    "summarize_results",
    "totals_for_month",
    "totals_in_range",
    "transactions_in_month",
]
