"""Contract tests for the backend tool service."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from backend.repositories.transactions_repository import InMemoryTransactionsRepository
from backend.services.tools import BackendToolService
from shared.models import (
    CalendarMonthResult,
    CategoriesResult,
    HighlightSpan,
    MonthTransactionsResult,
    RangeTotalsResult,
    SpendingByCategoryResult,
    ToolError,
    ToolErrorCode,
    TransactionsSearchResult,
)
from tests.fakes import FOOD, HOUSING, LEISURE, make_transaction, sample_transactions


def _service() -> BackendToolService:
    return BackendToolService(
        transactions_repository=InMemoryTransactionsRepository(sample_transactions())
    )


class _BrokenRepository:
    def list_transactions(self):
        raise RuntimeError("snapshot unavailable")

    def list_categories(self):
        raise RuntimeError("snapshot unavailable")


def test_transactions_search_returns_matches_with_highlight_and_summary() -> None:
    result = _service().transactions_search("#ano:2026 água")

    assert isinstance(result, TransactionsSearchResult)
    assert result.query.year == 2026
    assert result.query.text_term == "água"
    assert [item.transaction.id for item in result.items] == [1]
    assert result.items[0].highlight == HighlightSpan(before="Conta de ", match="Água", after="")
    assert result.summary.count == 1
    assert result.summary.expense == Decimal("80.00")


def test_transactions_search_tag_only_query_has_no_highlight() -> None:
    result = _service().transactions_search("#categoria:lazer")

    assert isinstance(result, TransactionsSearchResult)
    assert [item.transaction.id for item in result.items] == [2, 6]
    assert all(item.highlight is None for item in result.items)


def test_transactions_search_empty_query_returns_no_items() -> None:
    result = _service().transactions_search("   ")

    assert isinstance(result, TransactionsSearchResult)
    assert result.items == []
    assert result.summary.count == 0


def test_transactions_search_maps_repository_failure_to_tool_error() -> None:
    service = BackendToolService(transactions_repository=_BrokenRepository())

    result = service.transactions_search("mercado")

    assert isinstance(result, ToolError)
    assert result.code == ToolErrorCode.BACKEND_ERROR
    assert result.message == "snapshot unavailable"


def test_transactions_search_highlights_every_text_match() -> None:
    service = BackendToolService(
        transactions_repository=InMemoryTransactionsRepository(
            [make_transaction(1, "ΟΔΟΣ", "5", "2026-02-01")]
        )
    )

    result = service.transactions_search("ΟΔΟΣ")

    assert isinstance(result, TransactionsSearchResult)
    assert [item.transaction.id for item in result.items] == [1]
    assert result.items[0].highlight == HighlightSpan(before="", match="ΟΔΟΣ", after="")


def test_categories_lists_snapshot_categories() -> None:
    result = _service().categories()

    assert result == CategoriesResult(items=[FOOD, HOUSING, LEISURE])


def test_categories_maps_repository_failure_to_tool_error() -> None:
    result = BackendToolService(transactions_repository=_BrokenRepository()).categories()

    assert isinstance(result, ToolError)
    assert result.code == ToolErrorCode.BACKEND_ERROR


def test_transactions_month_returns_listing_and_totals() -> None:
    result = _service().transactions_month(2026, 1)

    assert isinstance(result, MonthTransactionsResult)
    assert [transaction.id for transaction in result.items] == [5]
    assert result.totals.expense == Decimal("12.00")


def test_transactions_month_rejects_invalid_month() -> None:
    result = _service().transactions_month(2026, 13)

    assert isinstance(result, ToolError)
    assert result.code == ToolErrorCode.VALIDATION_ERROR


def test_calendar_month_uses_configured_week_start() -> None:
    service = BackendToolService(
        transactions_repository=InMemoryTransactionsRepository(sample_transactions()),
        calendar_week_start=0,
    )

    result = service.calendar_month(2026, 2)

    assert isinstance(result, CalendarMonthResult)
    assert result.days[0].date == date(2026, 1, 26)
    assert result.totals.income == Decimal("5000.00")


def test_totals_range_and_inverted_range() -> None:
    service = _service()

    result = service.totals_range(date(2026, 2, 1), date(2026, 2, 28))
    inverted = service.totals_range(date(2026, 2, 28), date(2026, 2, 1))

    assert isinstance(result, RangeTotalsResult)
    assert result.totals.balance == Decimal("4654.30")
    assert isinstance(inverted, ToolError)
    assert inverted.code == ToolErrorCode.VALIDATION_ERROR


def test_spending_by_category_uses_configured_sentinel() -> None:
    service = BackendToolService(
        transactions_repository=InMemoryTransactionsRepository(sample_transactions()),
        uncategorized_label="No category",
        uncategorized_color="#000000",
    )

    result = service.spending_by_category(date(2026, 2, 1), date(2026, 2, 28))

    assert isinstance(result, SpendingByCategoryResult)
    assert [item.category_name for item in result.items] == [
        "Food",
        "Habitação",
        "Lazer",
        "No category",
    ]
    assert result.items[-1].color == "#000000"
    assert result.total == Decimal("345.70")


def test_spending_by_category_without_range_covers_snapshot() -> None:
    result = _service().spending_by_category()

    assert isinstance(result, SpendingByCategoryResult)
    assert result.date_range is None
    assert result.items[0].total == Decimal("222.30")


def test_spending_by_category_requires_both_dates() -> None:
    result = _service().spending_by_category(start_date=date(2026, 2, 1))

    assert isinstance(result, ToolError)
    assert result.code == ToolErrorCode.VALIDATION_ERROR


def test_calendar_month_last_representable_month() -> None:
    result = _service().calendar_month(9999, 12)

    assert isinstance(result, CalendarMonthResult)
    assert result.days[-1].date == date(9999, 12, 31)
