"""Text helpers for accent and case insensitive comparisons."""

from __future__ import annotations

import unicodedata


def normalize(value: str) -> str:
    """Lower-case ``value`` and strip its diacritical marks.

    Digits, punctuation and whitespace are kept as-is, so ``"Água 2026!"``
    becomes ``"agua 2026!"``. Applying it twice gives the same result.
    """

    decomposed = unicodedata.normalize("NFD", value.lower())
    return "".join(char for char in decomposed if not unicodedata.combining(char))
