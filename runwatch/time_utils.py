"""Centralised timestamp handling.

Run records and events carry ISO-8601 strings; charts work in
milliseconds since epoch. All conversions go through this module.
Internal representation: UTC-aware ``datetime``.
"""

import time
from datetime import datetime, timezone


def parse_timestamp(ts: str | int | float) -> datetime:
    """Parse a timestamp to a UTC-aware datetime.

    Accepted inputs:
      * ISO 8601 string (``T`` or space separator, with or without ``Z``)
      * Integer or float milliseconds since epoch
      * String containing a numeric value (treated as milliseconds)

    Raises:
        ValueError: for empty or unparseable strings
    """
    if isinstance(ts, (int, float)):
        return datetime.fromtimestamp(ts / 1000, tz=timezone.utc)

    s = (ts or "").strip()
    if not s:
        raise ValueError("empty timestamp")

    if s.replace(".", "", 1).lstrip("-").isdigit():
        return datetime.fromtimestamp(float(s) / 1000, tz=timezone.utc)

    s = s.replace("Z", "+00:00")
    s = s.replace(" ", "T", 1)

    dt = datetime.fromisoformat(s)
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


def iso_to_ms(ts: str) -> int:
    """Convert an ISO timestamp string to milliseconds since epoch."""
    return int(parse_timestamp(ts).timestamp() * 1000)


def now_ms() -> int:
    """Current wall-clock time in milliseconds since epoch."""
    return int(time.time() * 1000)
