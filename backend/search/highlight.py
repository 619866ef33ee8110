"""Locate the searched term inside a description for display emphasis."""

from __future__ import annotations

import unicodedata

from shared.models import HighlightSpan
from shared.text_utils import normalize


def _normalized_with_offsets(text: str) -> tuple[str, list[int]]:
    """Normalize ``text`` and map each normalized char to its source index.

    ``str.lower`` is applied to the whole string, as :func:`normalize` does,
    so context-dependent forms such as the Greek final sigma agree.
    """

    lowered = text.lower()
    pieces: list[str] = []
    offsets: list[int] = []
    cursor = 0
    for index, char in enumerate(text):
        width = len(char.lower())
        for lowered_char in lowered[cursor:cursor + width]:
            for decomposed in unicodedata.normalize("NFD", lowered_char):
                if not unicodedata.combining(decomposed):
                    pieces.append(decomposed)
                    offsets.append(index)
        cursor += width
    return "".join(pieces), offsets


def locate_highlight(text: str, term: str) -> HighlightSpan | None:
    """Split ``text`` around the first accent/case-insensitive match of ``term``."""

    normalized_term = normalize(term)
    if not normalized_term:
        return None

    normalized_text, offsets = _normalized_with_offsets(text)
    position = normalized_text.find(normalized_term)
    if position == -1:
        return None

    start = offsets[position]
    end = offsets[position + len(normalized_term) - 1] + 1
    while end < len(text) and unicodedata.combining(text[end]):
        end += 1
    return HighlightSpan(before=text[:start], match=text[start:end], after=text[end:])
