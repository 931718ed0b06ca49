"""Metric normalization.

Provider payloads mix raw floats, formatted strings ("$12.3B", "5.20%"),
None, NaN and "N/A". Everything is coerced here, once, at ingestion. The
rest of the package only ever sees ``float | None``.

The normalization contract:
1. None, NaN, inf, bools and unparsable input are "unavailable" (None)
2. Numbers pass through as float (idempotent)
3. Strings keep only digits, '-' and '.', then parse
4. Scaling is never inferred from a suffix: "$12.3B" -> 12.3, "5.20%" -> 5.2
"""

from __future__ import annotations

import math
import re
from typing import Any

_NON_NUMERIC = re.compile(r"[^0-9.\-]")


def parse_number(value: Any) -> float | None:
    """Parse a raw metric value into a finite float, or None if unavailable.

    Examples:
        >>> parse_number("$12.3B")
        12.3
        >>> parse_number("5.20%")
        5.2
        >>> parse_number("N/A") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            result = float(value)
        except (OverflowError, ValueError):
            return None
    elif isinstance(value, str):
        cleaned = _NON_NUMERIC.sub("", value)
        if not cleaned:
            return None
        try:
            result = float(cleaned)
        except ValueError:
            return None
    else:
        # numpy scalars, Decimal, etc.
        try:
            result = float(value)
        except (TypeError, ValueError):
            return None

    if math.isnan(result) or math.isinf(result):
        return None
    return result


def to_number(value: Any, default: float = 0.0) -> float:
    """Coerce a raw metric value to float, substituting ``default`` when unavailable.

    Never raises. Use ``default=1.0`` for multiplicative factors such as beta
    where 0 would be semantically wrong.
    """
    parsed = parse_number(value)
    return default if parsed is None else parsed


def sanitize_nan_inf(obj: Any) -> Any:
    """Recursively replace NaN/inf floats with None for strict JSON output."""
    if isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            return None
        return obj
    if isinstance(obj, dict):
        return {k: sanitize_nan_inf(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [sanitize_nan_inf(v) for v in obj]
    return obj
