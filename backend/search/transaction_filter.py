"""Conjunctive filtering of transactions against a parsed search query."""

from __future__ import annotations

from collections.abc import Iterable

from backend.search.query_parser import parse_query
from shared.models import ParsedQuery, Transaction
from shared.text_utils import normalize


def _matches_text(transaction: Transaction, normalized_term: str) -> bool:
    if not normalized_term:
        return True
    return normalized_term in normalize(transaction.description)


def _matches_category(transaction: Transaction, category_term: str | None) -> bool:
    if category_term is None:
        return True
    if transaction.category is None:
        return False
    return category_term in normalize(transaction.category.name)


def _matches_period(transaction: Transaction, query: ParsedQuery) -> bool:
    if query.month is not None and transaction.effective_date.month - 1 != query.month:
        return False
    if query.year is not None and transaction.effective_date.year != query.year:
        return False
    return True


def sort_most_recent_first(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Sort by effective date, newest first, keeping input order for equal dates."""

    return sorted(transactions, key=lambda transaction: transaction.effective_date, reverse=True)


def filter_transactions(
    transactions: Iterable[Transaction],
    query: ParsedQuery,
) -> list[Transaction]:
    """Return transactions matching every clause of ``query``, newest first.

    A query without any clause matches nothing; callers wanting the full
    listing go through the aggregation helpers instead.
    """

    if query.is_empty:
        return []

    normalized_term = normalize(query.text_term)
    matches = [
        transaction
        for transaction in transactions
        if _matches_text(transaction, normalized_term)
        and _matches_category(transaction, query.category_term)
        and _matches_period(transaction, query)
    ]
    return sort_most_recent_first(matches)


def search_transactions(transactions: Iterable[Transaction], raw_query: str) -> list[Transaction]:
    """Parse ``raw_query`` and filter ``transactions`` with it."""

    return filter_transactions(transactions, parse_query(raw_query))
