"""Backend tool service for the search, calendar and spending views.

Each method composes the pure search/aggregation helpers over the current
snapshot and returns either a result model or a ``ToolError``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from backend.reporting.aggregation import (
    UNCATEGORIZED_COLOR,
    UNCATEGORIZED_LABEL,
    SUNDAY,
    aggregate_by_category,
    calendar_days,
    summarize_results,
    totals_for_month,
    totals_in_range,
    transactions_in_month,
)
from backend.repositories.transactions_repository import TransactionsRepository
from backend.search.highlight import locate_highlight
from backend.search.query_parser import parse_query
from backend.search.transaction_filter import filter_transactions
from shared.models import (
    CalendarMonthResult,
    CategoriesResult,
    DateRange,
    MonthTransactionsResult,
    RangeTotalsResult,
    SearchMatch,
    SpendingByCategoryResult,
    ToolError,
    ToolErrorCode,
    TransactionsSearchResult,
)


logger = logging.getLogger(__name__)


def _validate_month(year: int, month: int) -> ToolError | None:
    if not 1 <= month <= 12 or not 1 <= year <= 9999:
        return ToolError(
            code=ToolErrorCode.VALIDATION_ERROR,
            message="year and month must form a valid calendar month",
            details={"year": year, "month": month},
        )
    return None


def _validate_range(start_date: date, end_date: date) -> ToolError | None:
    if start_date > end_date:
        return ToolError(
            code=ToolErrorCode.VALIDATION_ERROR,
            message="start_date must be before or equal to end_date",
            details={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
        )
    return None


@dataclass(slots=True)
class BackendToolService:
    transactions_repository: TransactionsRepository
    uncategorized_label: str = UNCATEGORIZED_LABEL
    uncategorized_color: str | None = UNCATEGORIZED_COLOR
    calendar_week_start: int = SUNDAY

    def transactions_search(self, raw_query: str) -> TransactionsSearchResult | ToolError:
        try:
            query = parse_query(raw_query)
            matches = filter_transactions(self.transactions_repository.list_transactions(), query)
            items = [
                SearchMatch(
                    transaction=transaction,
                    highlight=locate_highlight(transaction.description, query.text_term),
                )
                for transaction in matches
            ]
            logger.info(
                "transactions_search_completed query_length=%s matches=%s",
                len(raw_query),
                len(items),
            )
            return TransactionsSearchResult(
                query=query,
                items=items,
                summary=summarize_results(matches),
            )
        except Exception as exc:  # normalization at contract boundary
            logger.exception("transactions_search_failed")
            return ToolError(code=ToolErrorCode.BACKEND_ERROR, message=str(exc))

    def categories(self) -> CategoriesResult | ToolError:
        try:
            return CategoriesResult(items=self.transactions_repository.list_categories())
        except Exception as exc:  # normalization at contract boundary
            logger.exception("categories_failed")
            return ToolError(code=ToolErrorCode.BACKEND_ERROR, message=str(exc))

    def transactions_month(self, year: int, month: int) -> MonthTransactionsResult | ToolError:
        validation_error = _validate_month(year, month)
        if validation_error is not None:
            return validation_error

        try:
            transactions = self.transactions_repository.list_transactions()
            return MonthTransactionsResult(
                year=year,
                month=month,
                items=transactions_in_month(transactions, year, month),
                totals=totals_for_month(transactions, year, month),
            )
        except Exception as exc:  # normalization at contract boundary
            logger.exception("transactions_month_failed year=%s month=%s", year, month)
            return ToolError(code=ToolErrorCode.BACKEND_ERROR, message=str(exc))

    def calendar_month(self, year: int, month: int) -> CalendarMonthResult | ToolError:
        validation_error = _validate_month(year, month)
        if validation_error is not None:
            return validation_error

        try:
            transactions = self.transactions_repository.list_transactions()
            return CalendarMonthResult(
                year=year,
                month=month,
                days=calendar_days(
                    transactions,
                    year,
                    month,
                    week_start=self.calendar_week_start,
                ),
                totals=totals_for_month(transactions, year, month),
            )
        except Exception as exc:  # normalization at contract boundary
            logger.exception("calendar_month_failed year=%s month=%s", year, month)
            return ToolError(code=ToolErrorCode.BACKEND_ERROR, message=str(exc))

    def totals_range(self, start_date: date, end_date: date) -> RangeTotalsResult | ToolError:
        validation_error = _validate_range(start_date, end_date)
        if validation_error is not None:
            return validation_error

        try:
            totals = totals_in_range(
                self.transactions_repository.list_transactions(), start_date, end_date
            )
            return RangeTotalsResult(
                date_range=DateRange(start_date=start_date, end_date=end_date),
                totals=totals,
            )
        except Exception as exc:  # normalization at contract boundary
            logger.exception("totals_range_failed")
            return ToolError(code=ToolErrorCode.BACKEND_ERROR, message=str(exc))

    def spending_by_category(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> SpendingByCategoryResult | ToolError:
        if (start_date is None) != (end_date is None):
            return ToolError(
                code=ToolErrorCode.VALIDATION_ERROR,
                message="start_date and end_date must be provided together",
            )

        date_range: DateRange | None = None
        if start_date is not None and end_date is not None:
            validation_error = _validate_range(start_date, end_date)
            if validation_error is not None:
                return validation_error
            date_range = DateRange(start_date=start_date, end_date=end_date)

        try:
            transactions = self.transactions_repository.list_transactions()
            if date_range is not None:
                transactions = [
                    transaction
                    for transaction in transactions
                    if date_range.start_date <= transaction.effective_date <= date_range.end_date
                ]
            items = aggregate_by_category(
                transactions,
                uncategorized_label=self.uncategorized_label,
                uncategorized_color=self.uncategorized_color,
            )
            return SpendingByCategoryResult(
                date_range=date_range,
                items=items,
                total=sum((item.total for item in items), Decimal("0")),
            )
        except Exception as exc:  # normalization at contract boundary
            logger.exception("spending_by_category_failed")
            return ToolError(code=ToolErrorCode.BACKEND_ERROR, message=str(exc))
