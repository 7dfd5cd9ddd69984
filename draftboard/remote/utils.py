"""Shared utilities."""

from __future__ import annotations

import math
from typing import Any, Optional

API_TIMEOUT = 30.0


def safe_float(val: Any) -> Optional[float]:
    """Parse a loosely-typed numeric cell; ``None`` when it is not a number.

    Spreadsheet-backed services send numbers, numeric strings, blanks and
    the odd ``"n/a"``.  Non-finite floats are kept as-is.
    """
    if val is None or isinstance(val, bool):
        return None
    if isinstance(val, (int, float)):
        return float(val)
    if isinstance(val, str):
        text = val.strip()
        if not text:
            return None
        try:
            return float(text)
        except ValueError:
            return None
    return None


def safe_int(val: Any) -> Optional[int]:
    """Like ``safe_float`` for counters; non-finite values become ``None``."""
    n = safe_float(val)
    if n is None or not math.isfinite(n):
        return None
    return int(n)


def finite_or(val: Optional[float], default: float) -> float:
    """Return ``val`` when it is a finite number, otherwise ``default``."""
    if val is None or not math.isfinite(val):
        return default
    return val
