"""Lenient numeric coercion for loosely-typed telemetry payloads."""

import math
from typing import Any


__all__ = [
    "SECONDS_THRESHOLD",
    "normalize_ts_ms",
    "to_number",
]


# Second-resolution epoch values stay below this until 2286; millisecond
# values after 2001 are always above it.
SECONDS_THRESHOLD = 10_000_000_000


def to_number(value: Any) -> float | None:
    """
    Coerce an untyped value to a finite float.

    Accepts ints, floats and numeric strings. NaN, +/-Infinity, booleans,
    unparseable strings and every other type yield ``None``. Never raises.
    """
    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            n = float(value)
        except OverflowError:
            return None
        return n if math.isfinite(n) else None

    if isinstance(value, str):
        s = value.strip()
        # float() would accept digit separators like "1_000"
        if not s or "_" in s:
            return None
        try:
            n = float(s)
        except ValueError:
            return None
        return n if math.isfinite(n) else None

    return None


def normalize_ts_ms(ts: float) -> int:
    """Return *ts* as integer milliseconds, scaling second-resolution values."""
    if ts < SECONDS_THRESHOLD:
        return int(ts * 1000)
    return int(ts)
