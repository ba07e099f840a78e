"""Parsing of numbers typed by users or read from TACO spreadsheets."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

# TACO marks missing analyses with NA, traces with Tr and unanalysed cells
# with "*" or "-".
_MISSING_MARKERS = {"", "na", "nd", "tr", "*", "-", "--"}


def parse_number(value: Any) -> Decimal | None:
    """Parse a number in pt-BR ("1.234,5") or plain ("1234.5") notation.

    Returns None for empty cells, TACO markers and anything that is not a
    finite number.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, (int, float)):
        parsed = Decimal(str(value))
        return parsed if parsed.is_finite() else None

    text = str(value).strip().replace(" ", "")
    if text.lower() in _MISSING_MARKERS:
        return None

    if "," in text:
        # pt-BR: dots group thousands, comma marks decimals
        text = text.replace(".", "").replace(",", ".")

    try:
        parsed = Decimal(text)
    except (InvalidOperation, ValueError):
        return None
    return parsed if parsed.is_finite() else None


def parse_number_or_zero(value: Any) -> Decimal:
    """Like parse_number, but missing values count as zero."""
    parsed = parse_number(value)
    return parsed if parsed is not None else Decimal("0")
