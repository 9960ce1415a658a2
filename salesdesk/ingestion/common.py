"""Shared helpers for turning raw worksheet cells into clean values."""
from __future__ import annotations

import math
from typing import Any, Optional


def format_value(raw: Any) -> str:
    """Render a cell value as trimmed text (``""`` for empty cells).

    Whole-number floats drop their ``.0`` so a numeric name such as ``2024``
    reads the same as it does in the sheet.
    """

    if raw is None:
        return ""
    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)
    return str(raw).strip()


def has_value(raw: Any) -> bool:
    """Return whether a cell counts as filled in."""

    if raw is None or raw is False:
        return False
    if isinstance(raw, str):
        return bool(raw.strip())
    if isinstance(raw, (int, float)):
        return raw != 0
    return True


def clean_amount(raw: Any) -> Optional[float]:
    """Convert a price cell into a float, or ``None`` when it is not a usable number.

    Accepts numbers and plain numeric text such as ``"12.5"``. Currency
    symbols, thousands separators and comma decimals make a cell
    non-numeric. Blanks, booleans and zero yield ``None`` as well.
    """

    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip()
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    if not math.isfinite(value) or value == 0:
        return None
    return value
