"""Composition root for backend services."""

from __future__ import annotations

import logging

from backend.repositories.transactions_repository import (
    InMemoryTransactionsRepository,
    SnapshotLoadError,
    load_transactions_snapshot,
)
from backend.services.tools import BackendToolService
from shared import config


logger = logging.getLogger(__name__)


def build_transactions_repository() -> InMemoryTransactionsRepository:
    """Build the snapshot repository, seeded from the configured JSON file.

    An unreadable snapshot is logged and replaced by an empty one so the API
    still starts.
    """

    snapshot_path = config.transactions_snapshot_path()
    if snapshot_path is None:
        return InMemoryTransactionsRepository()

    try:
        transactions = load_transactions_snapshot(snapshot_path)
    except SnapshotLoadError:
        logger.exception("transactions_snapshot_load_failed path=%s", snapshot_path)
        return InMemoryTransactionsRepository()

    return InMemoryTransactionsRepository(transactions)


def build_backend_tool_service() -> BackendToolService:
    """Build backend tool service with repository adapters."""

    return BackendToolService(
        transactions_repository=build_transactions_repository(),
        uncategorized_label=config.uncategorized_label(),
        uncategorized_color=config.uncategorized_color(),
        calendar_week_start=config.calendar_week_start(),
    )
