"""Transactions snapshot repositories.

The service of record owns persistence. Here a repository only holds the
materialized transaction list the search and aggregation helpers run on.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from pydantic import TypeAdapter, ValidationError

from shared.models import Category, Transaction


logger = logging.getLogger(__name__)

_TRANSACTION_FIELDS = frozenset(
    {"id", "description", "amount", "effectiveDate", "type", "recurrence", "category"}
)
_CATEGORY_FIELDS = frozenset({"id", "name", "color", "icon"})
_transactions_adapter = TypeAdapter(list[Transaction])


class SnapshotLoadError(ValueError):
    """Raised when a transactions snapshot cannot be read or validated."""


class TransactionsRepository(Protocol):
    def list_transactions(self) -> list[Transaction]:
        """Return the current snapshot in insertion order."""

    def list_categories(self) -> list[Category]:
        """Return distinct categories referenced by the snapshot."""


class InMemoryTransactionsRepository:
    """Immutable in-process snapshot of the external transaction store."""

    def __init__(self, transactions: Iterable[Transaction] = ()) -> None:
        self._transactions: tuple[Transaction, ...] = tuple(transactions)

    def list_transactions(self) -> list[Transaction]:
        return list(self._transactions)

    def list_categories(self) -> list[Category]:
        categories: dict[int, Category] = {}
        for transaction in self._transactions:
            if transaction.category is not None and transaction.category.id not in categories:
                categories[transaction.category.id] = transaction.category
        return sorted(categories.values(), key=lambda category: category.name.lower())


def _strip_audit_fields(row: object) -> object:
    """Drop service-side fields (``createdAt``, ``updatedAt``...) from a row."""

    if not isinstance(row, dict):
        return row

    cleaned = {key: value for key, value in row.items() if key in _TRANSACTION_FIELDS}
    category = cleaned.get("category")
    if isinstance(category, dict):
        cleaned["category"] = {
            key: value for key, value in category.items() if key in _CATEGORY_FIELDS
        }
    return cleaned


def parse_transactions_payload(payload: object) -> list[Transaction]:
    """Validate a ``TransactionResponse`` list, bare or under ``transactions``."""

    if isinstance(payload, dict):
        payload = payload.get("transactions")
    if not isinstance(payload, list):
        raise SnapshotLoadError("Snapshot must be a list of transactions")

    try:
        return _transactions_adapter.validate_python(
            [_strip_audit_fields(row) for row in payload]
        )
    except ValidationError as exc:
        raise SnapshotLoadError(f"Invalid transactions snapshot: {exc.error_count()} error(s)") from exc


def load_transactions_snapshot(path: str | Path) -> list[Transaction]:
    """Read and validate a JSON transactions snapshot file."""

    snapshot_path = Path(path)
    try:
        payload = json.loads(snapshot_path.read_text(encoding="utf-8"))
    except (FileNotFoundError, IsADirectoryError, PermissionError) as exc:
        raise SnapshotLoadError(f"Cannot read snapshot {snapshot_path}") from exc
    except json.JSONDecodeError as exc:
        raise SnapshotLoadError(f"Snapshot {snapshot_path} is not valid JSON") from exc

    transactions = parse_transactions_payload(payload)
    logger.info("transactions_snapshot_loaded path=%s count=%s", snapshot_path, len(transactions))
    return transactions
