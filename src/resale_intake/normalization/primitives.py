"""Primitive text and number normalizers shared by the field rules."""

from __future__ import annotations

import math
import re

_FIRST_NUMBER = re.compile(r"(\d+(\.\d+)?)")
_NON_MONEY_CHARS = re.compile(r"[^0-9.]")
_LEADING_ZEROS = re.compile(r"^0+(?=\d)")

Number = int | float


def parse_first_number(value: object) -> float | None:
    """Return the first decimal number found in ``value``, or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if not value:
        return None
    match = _FIRST_NUMBER.search(str(value))
    if not match:
        return None
    try:
        return float(match.group(1))
    except ValueError:
        return None


def clamp(value: float, lo: float, hi: float) -> float:
    return min(max(value, lo), hi)


def round_to_half(value: float) -> float:
    # Half-up, so 7.25 -> 7.5 rather than banker's rounding.
    return math.floor(value * 2 + 0.5) / 2


def format_number(value: float) -> str:
    """Format a number with one decimal place, dropping a trailing ``.0``."""
    formatted = f"{value:.1f}"
    return formatted[:-2] if formatted.endswith(".0") else formatted


def as_number(value: float) -> Number:
    """Return ``value`` as an int when it has no fractional part."""
    return int(value) if float(value).is_integer() else value


def parse_money(value: object) -> str:
    """Strip currency noise from ``value`` and return a bare numeric string.

    Everything but digits and dots is removed. The first dot is kept as the
    decimal point and any later dot-separated fragments are appended to the
    fraction. Leading zeros are removed only when another digit follows, so
    ``"000.5"`` becomes ``"0.5"`` and ``"0"`` stays ``"0"``.
    """
    if not value:
        return ""
    cleaned = _NON_MONEY_CHARS.sub("", str(value))
    if not cleaned:
        return ""
    whole, *rest = cleaned.split(".")
    normalized = f"{whole}.{''.join(rest)}" if rest else whole
    return _LEADING_ZEROS.sub("", normalized)


def dedupe_adjacent_words(value: str | None) -> str:
    """Drop tokens that repeat the previous kept token, ignoring case."""
    if not value:
        return ""
    deduped: list[str] = []
    for token in value.split():
        if deduped and deduped[-1].lower() == token.lower():
            continue
        deduped.append(token)
    if len(deduped) > 1 and deduped[-1].lower() == deduped[-2].lower():
        deduped.pop()
    return " ".join(deduped)


def escape_regex(value: str) -> str:
    return re.escape(value)


def ends_with_word(value: str | None, word: str | None) -> bool:
    """Return True when ``value`` ends with ``word`` on a word boundary."""
    if not value or not word:
        return False
    return re.search(rf"\b{escape_regex(word)}$", value.strip(), flags=re.IGNORECASE) is not None
