"""Placement of trade markers on price and equity charts."""

import math
from bisect import bisect_right
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence

from .candle import Candle
from .points import EquityPoint, TradePoint


__all__ = [
    "MarkerSide",
    "TradeMarker",
    "align_trades_to_candles",
    "align_trades_to_equity",
    "classify_side",
    "nearest_preceding",
]


class MarkerSide(str, Enum):
    """Visual category of a trade marker. There is no third state."""
    BUY = "buy"
    SELL = "sell"


def classify_side(side: str) -> MarkerSide:
    """Map a raw side token to a marker category; anything but BUY is SELL."""
    return MarkerSide.BUY if side.upper() == "BUY" else MarkerSide.SELL


@dataclass(frozen=True)
class TradeMarker:
    """A trade positioned in chart data space (x = ts, y = anchor value)."""
    ts: int
    y: float
    side: MarkerSide
    trade: TradePoint


def nearest_preceding(points: Sequence[EquityPoint], ts: int) -> Optional[EquityPoint]:
    """
    Find the sample with the greatest ``ts`` not after *ts*.

    *points* must be sorted ascending by timestamp. Runs in O(log n). When
    *ts* precedes every sample the first sample is returned, so only an
    empty sequence yields None.
    """
    if not points:
        return None
    i = bisect_right(points, ts, key=lambda p: p.ts)
    return points[max(i - 1, 0)]


def align_trades_to_candles(
    candles: Sequence[Candle], trades: Iterable[TradePoint]
) -> list[TradeMarker]:
    """
    Direct inclusion for candlestick overlays.

    A trade is kept when its timestamp lies within the visible candle range
    (inclusive) and its price is finite; it is anchored at its own price.
    Trades outside the range are dropped, not clamped.
    """
    if not candles:
        return []

    min_ts = candles[0].ts
    max_ts = candles[-1].ts

    out: list[TradeMarker] = []
    for t in trades:
        if t.ts < min_ts or t.ts > max_ts or not math.isfinite(t.price):
            continue
        out.append(TradeMarker(ts=t.ts, y=t.price, side=classify_side(t.side), trade=t))
    return out


def align_trades_to_equity(
    points: Sequence[EquityPoint], trades: Iterable[TradePoint]
) -> list[TradeMarker]:
    """
    Nearest-preceding lookup for equity overlays.

    Each trade is anchored at the equity value of the closest sample at or
    before it, showing where the trade fell on the curve rather than its
    execution price.
    """
    out: list[TradeMarker] = []
    for t in trades:
        base = nearest_preceding(points, t.ts)
        if base is None:
            continue
        out.append(TradeMarker(ts=t.ts, y=base.equity, side=classify_side(t.side), trade=t))
    return out
