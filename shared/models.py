"""Pydantic contracts shared across the search core, services and API."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ToolErrorCode(str, Enum):
    """Stable error codes returned at the service boundary."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    BACKEND_ERROR = "BACKEND_ERROR"


class ToolError(BaseModel):
    model_config = ConfigDict(extra="forbid")

    code: ToolErrorCode
    message: str
    details: dict[str, object] | None = None


class _ValueModel(BaseModel):
    """Immutable value with camelCase wire names."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class TransactionType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class RecurrenceType(str, Enum):
    """Repeat cadence of a transaction. Never expanded by the search core."""

    NONE = "NONE"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class Category(_ValueModel):
    id: int
    name: str = Field(min_length=1)
    color: str | None = None
    icon: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("category name must not be blank")
        return value


class Transaction(_ValueModel):
    id: int
    description: str
    amount: Decimal = Field(ge=0)
    effective_date: date
    type: TransactionType
    recurrence: RecurrenceType = RecurrenceType.NONE
    category: Category | None = None


class ParsedQuery(_ValueModel):
    """Structured form of a raw search string."""

    text_term: str = ""
    category_term: str | None = None
    month: int | None = Field(default=None, ge=0, le=11)
    year: int | None = None

    @property
    def is_empty(self) -> bool:
        return (
            not self.text_term
            and self.category_term is None
            and self.month is None
            and self.year is None
        )


class HighlightSpan(_ValueModel):
    before: str
    match: str
    after: str


class DayAggregate(_ValueModel):
    income_count: int = 0
    expense_count: int = 0
    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")


class PeriodTotals(_ValueModel):
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")


class CategoryTotal(_ValueModel):
    category_name: str
    total: Decimal
    color: str | None = None


class CalendarDay(_ValueModel):
    date: date
    in_month: bool
    aggregate: DayAggregate
    transactions: list[Transaction] = Field(default_factory=list)


class SearchSummary(_ValueModel):
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")
    count: int = 0


class DateRange(_ValueModel):
    start_date: date
    end_date: date


class SearchMatch(_ValueModel):
    transaction: Transaction
    highlight: HighlightSpan | None = None


class TransactionsSearchResult(_ValueModel):
    query: ParsedQuery
    items: list[SearchMatch]
    summary: SearchSummary


class MonthTransactionsResult(_ValueModel):
    year: int
    month: int
    items: list[Transaction]
    totals: PeriodTotals


class CalendarMonthResult(_ValueModel):
    year: int
    month: int
    days: list[CalendarDay]
    totals: PeriodTotals


class RangeTotalsResult(_ValueModel):
    date_range: DateRange
    totals: PeriodTotals


class SpendingByCategoryResult(_ValueModel):
    date_range: DateRange | None = None
    items: list[CategoryTotal]
    total: Decimal


class CategoriesResult(_ValueModel):
    items: list[Category]
