"""Per-day, per-period and per-category aggregation of transactions.

Every helper is a pure function over the transaction list it receives and
rebuilds its result on each call.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from datetime import date, timedelta
from decimal import Decimal

from backend.search.transaction_filter import sort_most_recent_first
from shared.config import UNCATEGORIZED_COLOR, UNCATEGORIZED_LABEL
from shared.models import (
    CalendarDay,
    CategoryTotal,
    DayAggregate,
    PeriodTotals,
    SearchSummary,
    Transaction,
    TransactionType,
)

SUNDAY = calendar.SUNDAY


def _sum_by_type(transactions: Iterable[Transaction]) -> tuple[Decimal, Decimal, int, int]:
    income = Decimal("0")
    expense = Decimal("0")
    income_count = 0
    expense_count = 0
    for transaction in transactions:
        if transaction.type == TransactionType.INCOME:
            income += transaction.amount
            income_count += 1
        else:
            expense += transaction.amount
            expense_count += 1
    return income, expense, income_count, expense_count


def _day_aggregate(transactions: Iterable[Transaction]) -> DayAggregate:
    income, expense, income_count, expense_count = _sum_by_type(transactions)
    return DayAggregate(
        income_count=income_count,
        expense_count=expense_count,
        total_income=income,
        total_expense=expense,
    )


def _period_totals(transactions: Iterable[Transaction]) -> PeriodTotals:
    income, expense, _, _ = _sum_by_type(transactions)
    return PeriodTotals(income=income, expense=expense, balance=income - expense)


def _group_by_date(transactions: Iterable[Transaction]) -> dict[date, list[Transaction]]:
    grouped: dict[date, list[Transaction]] = {}
    for transaction in transactions:
        grouped.setdefault(transaction.effective_date, []).append(transaction)
    return grouped


def aggregate_by_day(transactions: Iterable[Transaction]) -> dict[date, DayAggregate]:
    """Bucket transactions by effective date, in ascending date order.

    Dates without transactions have no entry.
    """

    grouped = _group_by_date(transactions)
    return {day: _day_aggregate(grouped[day]) for day in sorted(grouped)}


def totals_in_range(
    transactions: Iterable[Transaction],
    start: date,
    end: date,
) -> PeriodTotals:
    """Income, expense and balance of transactions dated within ``[start, end]``."""

    return _period_totals(
        transaction for transaction in transactions if start <= transaction.effective_date <= end
    )


def aggregate_by_category(
    transactions: Iterable[Transaction],
    *,
    uncategorized_label: str = UNCATEGORIZED_LABEL,
    uncategorized_color: str | None = UNCATEGORIZED_COLOR,
) -> list[CategoryTotal]:
    """Sum expenses per category name, largest total first.

    Expenses without a category share a single ``uncategorized_label`` bucket.
    A category without any colour falls back to ``uncategorized_color``.
    Equal totals keep the order in which their category was first seen.
    """

    totals: dict[str, Decimal] = {}
    colors: dict[str, str | None] = {}
    for transaction in transactions:
        if transaction.type != TransactionType.EXPENSE:
            continue
        if transaction.category is None:
            name, color = uncategorized_label, uncategorized_color
        else:
            name, color = transaction.category.name, transaction.category.color

        totals[name] = totals.get(name, Decimal("0")) + transaction.amount
        if colors.get(name) is None:
            colors[name] = color

    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [
        CategoryTotal(category_name=name, total=total, color=colors[name] or uncategorized_color)
        for name, total in ordered
    ]


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first and last day of a 1-based calendar month."""

    _, last_day = calendar.monthrange(year, month)
    return date(year, month, 1), date(year, month, last_day)


def totals_for_month(transactions: Iterable[Transaction], year: int, month: int) -> PeriodTotals:
    start, end = month_bounds(year, month)
    return totals_in_range(transactions, start, end)


def transactions_in_month(
    transactions: Iterable[Transaction],
    year: int,
    month: int,
) -> list[Transaction]:
    """Unfiltered month listing, most recent first."""

    start, end = month_bounds(year, month)
    return sort_most_recent_first(
        transaction for transaction in transactions if start <= transaction.effective_date <= end
    )


def calendar_days(
    transactions: Iterable[Transaction],
    year: int,
    month: int,
    *,
    week_start: int = SUNDAY,
) -> list[CalendarDay]:
    """Build the full weeks covering a month, zero-filling empty days.

    ``week_start`` follows :mod:`calendar` numbering (0 is Monday, 6 is Sunday).
    The grid is cut at ``date.min`` and ``date.max`` for the first and last
    representable months.
    """

    month_start, month_end = month_bounds(year, month)
    leading = (month_start.weekday() - week_start) % 7
    trailing = ((week_start + 6) % 7 - month_end.weekday()) % 7
    grid_start = month_start - timedelta(days=min(leading, (month_start - date.min).days))
    grid_end = month_end + timedelta(days=min(trailing, (date.max - month_end).days))

    grouped = _group_by_date(
        transaction
        for transaction in transactions
        if grid_start <= transaction.effective_date <= grid_end
    )

    days: list[CalendarDay] = []
    for offset in range((grid_end - grid_start).days + 1):
        current = grid_start + timedelta(days=offset)
        day_transactions = grouped.get(current, [])
        days.append(
            CalendarDay(
                date=current,
                in_month=current.month == month,
                aggregate=_day_aggregate(day_transactions),
                transactions=day_transactions,
            )
        )
    return days


def summarize_results(transactions: Iterable[Transaction]) -> SearchSummary:
    """Income and expense sums plus the number of transactions listed."""

    income, expense, income_count, expense_count = _sum_by_type(transactions)
    return SearchSummary(income=income, expense=expense, count=income_count + expense_count)
