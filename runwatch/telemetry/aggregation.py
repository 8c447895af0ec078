"""Candle aggregation of equity samples into fixed-width time buckets."""

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from .candle import Candle
from .points import EquityPoint


__all__ = [
    "BUCKET_1MIN_MS",
    "BUCKET_30MIN_MS",
    "BUCKET_5MIN_MS",
    "aggregate_candles",
    "choose_bucket_width",
]


MINUTE_MS = 60 * 1000
HOUR_MS = 60 * MINUTE_MS
DAY_MS = 24 * HOUR_MS

BUCKET_1MIN_MS = MINUTE_MS
BUCKET_5MIN_MS = 5 * MINUTE_MS
BUCKET_30MIN_MS = 30 * MINUTE_MS


def choose_bucket_width(span_ms: int) -> int:
    """
    Choose a bucket width for a series covering *span_ms* milliseconds.

    Rule:
      - span > 2 days            -> 30 minutes
      - span > 12 hours          -> 5 minutes
      - otherwise                -> 1 minute
    """
    if span_ms > 2 * DAY_MS:
        return BUCKET_30MIN_MS
    if span_ms > 12 * HOUR_MS:
        return BUCKET_5MIN_MS
    return BUCKET_1MIN_MS


@dataclass
class _AggState:
    """Internal aggregation state for a single time bucket."""
    open: float
    high: float
    low: float
    close: float


def _span(points: Sequence[EquityPoint]) -> int:
    if not points:
        return 0
    ts = [p.ts for p in points]
    return max(ts) - min(ts)


def aggregate_candles(
    points: Iterable[EquityPoint], *, bucket_ms: Optional[int] = None
) -> list[Candle]:
    """
    Bucket equity samples into OHLC candles using wall-clock alignment.

    The price of a sample is its ``close`` when present, else its
    ``equity``. Samples are consumed in the order given, so the caller must
    pass them sorted ascending by timestamp: the last sample assigned to a
    bucket becomes its close.

    Args:
        points: Equity samples, ascending by ``ts``
        bucket_ms: Bucket width; chosen from the series span if None

    Returns:
        Candles sorted ascending by bucket start
    """
    points = list(points)
    if not points:
        return []

    width = bucket_ms if bucket_ms is not None else choose_bucket_width(_span(points))
    if width <= 0:
        raise ValueError(f"bucket_ms must be > 0, got {width}")

    buckets: dict[int, _AggState] = {}
    for p in points:
        price = float(p.price)
        if not math.isfinite(price):
            continue

        bucket_start = (p.ts // width) * width
        agg = buckets.get(bucket_start)
        if agg is None:
            buckets[bucket_start] = _AggState(open=price, high=price, low=price, close=price)
            continue

        agg.high = max(agg.high, price)
        agg.low = min(agg.low, price)
        agg.close = price

    return [
        Candle(ts=start, open=agg.open, high=agg.high, low=agg.low, close=agg.close)
        for start, agg in sorted(buckets.items())
    ]
