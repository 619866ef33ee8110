"""Configuration helpers for environment variables."""

from __future__ import annotations

import calendar
import os
import logging

from dotenv import load_dotenv


logger = logging.getLogger(__name__)


UNCATEGORIZED_LABEL = "Sem Categoria"
UNCATEGORIZED_COLOR = "#64748b"
_DEFAULT_CALENDAR_WEEK_START = calendar.SUNDAY


def _should_load_dotenv() -> bool:
    """Return whether local dotenv loading should run."""
    app_env = os.getenv("APP_ENV", "dev").strip().lower()
    return app_env in {"dev", "local"}


if _should_load_dotenv():
    load_dotenv()


def get_env(name: str, default: str | None = None) -> str | None:
    """Return a raw environment value or default."""
    return os.getenv(name, default)


def app_env() -> str:
    """Return the current application environment."""
    return (get_env("APP_ENV", "dev") or "dev").strip() or "dev"


def cors_allow_origins() -> list[str]:
    """Return CORS allowed origins from env with safe environment defaults."""
    raw_origins = get_env("CORS_ALLOW_ORIGINS", "") or ""
    parsed_origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]

    if parsed_origins:
        return parsed_origins

    if app_env().strip().lower() in {"dev", "local"}:
        return ["http://localhost:5173", "http://127.0.0.1:5173"]

    logger.warning(
        "cors_allow_origins_empty_in_prod app_env=%s; define CORS_ALLOW_ORIGINS",
        app_env(),
    )

    return []


def transactions_snapshot_path() -> str | None:
    """Return the JSON transactions snapshot path when configured."""
    raw_value = (get_env("TRANSACTIONS_SNAPSHOT_PATH", "") or "").strip()
    return raw_value or None


def uncategorized_label() -> str:
    """Return the label used for expenses without a category."""
    raw_value = (get_env("UNCATEGORIZED_LABEL", "") or "").strip()
    return raw_value or UNCATEGORIZED_LABEL


def uncategorized_color() -> str:
    """Return the chart colour used for expenses without a category."""
    raw_value = (get_env("UNCATEGORIZED_COLOR", "") or "").strip()
    return raw_value or UNCATEGORIZED_COLOR


def calendar_week_start() -> int:
    """Return the first weekday of calendar grids (0 is Monday, 6 is Sunday)."""
    raw_value = (get_env("CALENDAR_WEEK_START", "") or "").strip()
    if not raw_value:
        return _DEFAULT_CALENDAR_WEEK_START

    try:
        week_start = int(raw_value)
    except ValueError:
        week_start = -1

    if not 0 <= week_start <= 6:
        logger.warning("calendar_week_start_invalid value=%s; using default", raw_value)
        return _DEFAULT_CALENDAR_WEEK_START

    return week_start
