"""Deterministic parser for the transaction search box.

A query mixes free text with ``#key:value`` tag clauses::

    #categoria: Lazer #mes: fev #ano: 2026 cinema

Recognized keys are bilingual and case-insensitive: ``categoria``/``category``,
``mes``/``month`` and ``ano``/``year``. Any other ``#key:`` token is kept as
plain text.
"""

from __future__ import annotations

import re

from shared.models import ParsedQuery
from shared.text_utils import normalize

_PORTUGUESE_MONTHS: tuple[str, ...] = (
    "jan",
    "fev",
    "mar",
    "abr",
    "mai",
    "jun",
    "jul",
    "ago",
    "set",
    "out",
    "nov",
    "dez",
)

_ENGLISH_MONTHS: tuple[str, ...] = (
    "jan",
    "feb",
    "mar",
    "apr",
    "may",
    "jun",
    "jul",
    "aug",
    "sep",
    "oct",
    "nov",
    "dec",
)

_TAG_KEYS: dict[str, str] = {
    "categoria": "category",
    "category": "category",
    "mes": "month",
    "month": "month",
    "ano": "year",
    "year": "year",
}

_TAG_PATTERN = re.compile(
    r"#(?P<key>categoria|category|mes|month|ano|year):\s*(?P<value>[^\s#]*)",
    re.IGNORECASE,
)
_YEAR_PATTERN = re.compile(r"[0-9]{4}")


def parse_month(value: str) -> int | None:
    """Return the 0-based month for a Portuguese or English month name."""

    prefix = normalize(value[:3])
    if prefix in _PORTUGUESE_MONTHS:
        return _PORTUGUESE_MONTHS.index(prefix)
    if prefix in _ENGLISH_MONTHS:
        return _ENGLISH_MONTHS.index(prefix)
    return None


def parse_year(value: str) -> int | None:
    """Return the year when ``value`` is exactly four digits."""

    if _YEAR_PATTERN.fullmatch(value) is None:
        return None
    return int(value)


def _collapse_whitespace(value: str) -> str:
    return re.sub(r"\s+", " ", value).strip()


def parse_query(raw: str) -> ParsedQuery:
    """Split ``raw`` into structured filters and the residual free text.

    Clauses are applied left to right, so a repeated key keeps its last
    parsable value. Recognized clauses with a value that cannot be parsed are
    removed from the text and leave their field unset.
    """

    clauses: dict[str, object] = {}
    for match in _TAG_PATTERN.finditer(raw):
        field_name = _TAG_KEYS[match.group("key").lower()]
        value = match.group("value")
        if not value:
            continue

        if field_name == "category":
            clauses["category_term"] = normalize(value)
        elif field_name == "month":
            month = parse_month(value)
            if month is not None:
                clauses["month"] = month
        else:
            year = parse_year(value)
            if year is not None:
                clauses["year"] = year

    text_term = _collapse_whitespace(_TAG_PATTERN.sub(" ", raw))
    return ParsedQuery(text_term=text_term, **clauses)
