"""FastAPI entrypoint for the search, calendar and spending endpoints."""

from __future__ import annotations

import logging
from datetime import date, datetime
from functools import lru_cache
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.requests import Request
from fastapi.responses import JSONResponse

from backend.factory import build_backend_tool_service
from backend.services.tools import BackendToolService
from shared import config as _config
from shared.models import ToolError


logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_tool_service() -> BackendToolService:
    """Create and cache the backend tool service once per process."""

    return build_backend_tool_service()


app = FastAPI(title="Money Dashboard Search API")

ALLOW_ORIGINS = _config.cors_allow_origins()


@app.middleware("http")
async def log_http_requests(request: Request, call_next):
    """Log incoming requests, HTTP status codes and unexpected errors."""

    logger.info("http_request_received method=%s path=%s", request.method, request.url.path)
    try:
        response = await call_next(request)
    except Exception:
        logger.exception(
            "http_request_failed method=%s path=%s",
            request.method,
            request.url.path,
        )
        raise

    logger.info(
        "http_response_sent method=%s path=%s status_code=%s",
        request.method,
        request.url.path,
        response.status_code,
    )
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger.info("cors_allow_origins=%s", ALLOW_ORIGINS)


@app.exception_handler(Exception)
async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    """Return a JSON 500 response for unhandled exceptions."""

    logger.exception(
        "unhandled_exception method=%s path=%s exception_type=%s message=%s",
        request.method,
        request.url.path,
        type(exc).__name__,
        str(exc),
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


def _parse_iso_date(value: str, field_name: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid {field_name} format. Expected YYYY-MM-DD") from exc


def _parse_month(value: str | None) -> tuple[int, int]:
    if not value:
        today = date.today()
        return today.year, today.month
    try:
        parsed = datetime.strptime(value, "%Y-%m").date()
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid month format. Expected YYYY-MM") from exc
    return parsed.year, parsed.month


def _tool_response(result: Any) -> Any:
    if isinstance(result, ToolError):
        raise HTTPException(status_code=400, detail=result.message)
    return jsonable_encoder(result)


@app.get("/health")
def health() -> dict[str, str]:
    """Healthcheck endpoint."""

    return {"status": "ok"}


@app.get("/finance/transactions/search")
def search_transactions(q: str = Query(default="")) -> Any:
    """Run the search box query language over the transactions snapshot."""

    return _tool_response(get_tool_service().transactions_search(q))


@app.get("/finance/categories")
def list_categories() -> Any:
    """Return the distinct categories referenced by the snapshot, by name."""

    return _tool_response(get_tool_service().categories())


@app.get("/finance/transactions")
def list_month_transactions(month: str | None = None) -> Any:
    """Return the month listing (defaults to the current month) with totals."""

    year, month_number = _parse_month(month)
    return _tool_response(get_tool_service().transactions_month(year, month_number))


@app.get("/finance/calendar")
def get_calendar(month: str | None = None) -> Any:
    """Return the calendar grid of a month with per-day aggregates."""

    year, month_number = _parse_month(month)
    return _tool_response(get_tool_service().calendar_month(year, month_number))


@app.get("/finance/totals")
def get_range_totals(start_date: str, end_date: str) -> Any:
    """Return income, expense and balance for an inclusive date range."""

    parsed_start = _parse_iso_date(start_date, "start_date")
    parsed_end = _parse_iso_date(end_date, "end_date")
    return _tool_response(get_tool_service().totals_range(parsed_start, parsed_end))


@app.get("/finance/spending-by-category")
def get_spending_by_category(start_date: str | None = None, end_date: str | None = None) -> Any:
    """Return expense totals per category, largest first."""

    parsed_start = _parse_iso_date(start_date, "start_date") if start_date else None
    parsed_end = _parse_iso_date(end_date, "end_date") if end_date else None
    return _tool_response(get_tool_service().spending_by_category(parsed_start, parsed_end))
