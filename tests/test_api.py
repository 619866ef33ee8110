"""Tests for the finance HTTP endpoints exposed by backend.api."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

import backend.api as backend_api
from backend.api import app
from backend.repositories.transactions_repository import InMemoryTransactionsRepository
from backend.services.tools import BackendToolService
from shared.models import ToolError, ToolErrorCode
from tests.fakes import sample_transactions


client = TestClient(app)


@pytest.fixture(autouse=True)
def _sample_service(monkeypatch) -> None:
    service = BackendToolService(
        transactions_repository=InMemoryTransactionsRepository(sample_transactions())
    )
    monkeypatch.setattr(backend_api, "get_tool_service", lambda: service)


def test_health() -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_search_endpoint_returns_camel_case_payload() -> None:
    response = client.get("/finance/transactions/search", params={"q": "#mes:fev cinema"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["query"] == {"textTerm": "cinema", "categoryTerm": None, "month": 1, "year": None}
    assert [item["transaction"]["id"] for item in payload["items"]] == [2, 6]
    assert payload["items"][0]["transaction"]["effectiveDate"] == "2026-02-14"
    assert payload["items"][0]["highlight"] == {"before": "", "match": "Cinema", "after": " Shopping"}
    assert payload["summary"]["count"] == 2


def test_search_endpoint_without_query_returns_empty_items() -> None:
    response = client.get("/finance/transactions/search")

    assert response.status_code == 200
    assert response.json()["items"] == []


def test_categories_endpoint_lists_snapshot_categories_by_name() -> None:
    response = client.get("/finance/categories")

    assert response.status_code == 200
    items = response.json()["items"]
    assert [item["name"] for item in items] == ["Food", "Habitação", "Lazer"]
    assert items[0]["color"] == "#f97316"


def test_calendar_endpoint_returns_grid() -> None:
    response = client.get("/finance/calendar", params={"month": "2026-02"})

    assert response.status_code == 200
    payload = response.json()
    assert len(payload["days"]) == 28
    day_14 = next(day for day in payload["days"] if day["date"] == "2026-02-14")
    assert day_14["aggregate"]["expenseCount"] == 2
    assert Decimal(str(payload["totals"]["balance"])) == Decimal("4654.30")


def test_month_transactions_endpoint() -> None:
    response = client.get("/finance/transactions", params={"month": "2026-01"})

    assert response.status_code == 200
    assert [item["id"] for item in response.json()["items"]] == [5]


@pytest.mark.parametrize("path", ["/finance/calendar", "/finance/transactions"])
def test_month_endpoints_reject_invalid_month(path: str) -> None:
    response = client.get(path, params={"month": "2026/02"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid month format. Expected YYYY-MM"


def test_totals_endpoint() -> None:
    response = client.get(
        "/finance/totals",
        params={"start_date": "2026-02-01", "end_date": "2026-02-28"},
    )

    assert response.status_code == 200
    totals = response.json()["totals"]
    assert Decimal(str(totals["income"])) == Decimal("5000.00")
    assert Decimal(str(totals["expense"])) == Decimal("345.70")


def test_totals_endpoint_rejects_bad_date() -> None:
    response = client.get(
        "/finance/totals",
        params={"start_date": "2026-02-31", "end_date": "2026-02-28"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid start_date format. Expected YYYY-MM-DD"


def test_totals_endpoint_maps_tool_error_to_http_400() -> None:
    response = client.get(
        "/finance/totals",
        params={"start_date": "2026-03-01", "end_date": "2026-02-01"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "start_date must be before or equal to end_date"


def test_spending_by_category_endpoint() -> None:
    response = client.get("/finance/spending-by-category")

    assert response.status_code == 200
    items = response.json()["items"]
    assert items[0]["categoryName"] == "Food"
    assert items[-1]["categoryName"] == "Sem Categoria"


def test_spending_by_category_endpoint_maps_service_error(monkeypatch) -> None:
    class _Service:
        def spending_by_category(self, start_date, end_date):
            return ToolError(code=ToolErrorCode.BACKEND_ERROR, message="boom")

    monkeypatch.setattr(backend_api, "get_tool_service", lambda: _Service())

    response = client.get("/finance/spending-by-category")

    assert response.status_code == 400
    assert response.json()["detail"] == "boom"
