"""Tests for runwatch.telemetry.alignment – trade marker placement."""

import math

import pytest

from runwatch.telemetry.alignment import (
    MarkerSide,
    align_trades_to_candles,
    align_trades_to_equity,
    classify_side,
    nearest_preceding,
)
from runwatch.telemetry.candle import Candle
from runwatch.telemetry.points import EquityPoint, TradePoint


def _equity(*pairs):
    return [EquityPoint(ts=ts, equity=eq) for ts, eq in pairs]


def _candle(ts, price=1.0):
    return Candle(ts=ts, open=price, high=price, low=price, close=price)


class TestClassifySide:

    @pytest.mark.parametrize("side", ["BUY", "buy", "Buy"])
    def test_buy_any_case(self, side):
        assert classify_side(side) is MarkerSide.BUY

    @pytest.mark.parametrize("side", ["SELL", "sell", "short", "", "unknown"])
    def test_everything_else_is_sell(self, side):
        assert classify_side(side) is MarkerSide.SELL


# ---------------------------------------------------------------------------
# nearest_preceding
# ---------------------------------------------------------------------------

class TestNearestPreceding:

    POINTS = _equity((100, 1.0), (200, 2.0), (300, 3.0))

    def test_empty(self):
        assert nearest_preceding([], 100) is None

    def test_exact_match(self):
        assert nearest_preceding(self.POINTS, 200).equity == 2.0

    def test_between_samples(self):
        assert nearest_preceding(self.POINTS, 250).equity == 2.0

    def test_after_last(self):
        assert nearest_preceding(self.POINTS, 10_000).equity == 3.0

    def test_before_first_anchors_to_first(self):
        assert nearest_preceding(self.POINTS, 50).equity == 1.0

    def test_ties_resolve_to_last_duplicate(self):
        points = _equity((100, 1.0), (200, 2.0), (200, 2.5), (300, 3.0))
        assert nearest_preceding(points, 200).equity == 2.5

    def test_monotonic_and_idempotent(self):
        points = _equity(*[(ts, float(ts)) for ts in range(0, 1000, 37)])
        prev_ts = None
        for ts in range(-10, 1100, 13):
            found = nearest_preceding(points, ts)
            if prev_ts is not None:
                assert found.ts >= prev_ts
            prev_ts = found.ts
            assert nearest_preceding(points, found.ts) == found


# ---------------------------------------------------------------------------
# Candle overlay
# ---------------------------------------------------------------------------

class TestAlignTradesToCandles:

    def test_no_candles(self):
        trades = [TradePoint(ts=1, side="BUY", price=1.0)]
        assert align_trades_to_candles([], trades) == []

    def test_range_is_inclusive(self):
        candles = [_candle(60_000), _candle(120_000)]
        trades = [
            TradePoint(ts=59_999, side="BUY", price=1.0),
            TradePoint(ts=60_000, side="BUY", price=2.0),
            TradePoint(ts=90_000, side="sell", price=3.0),
            TradePoint(ts=120_000, side="SELL", price=4.0),
            TradePoint(ts=120_001, side="BUY", price=5.0),
        ]
        markers = align_trades_to_candles(candles, trades)
        assert [m.ts for m in markers] == [60_000, 90_000, 120_000]
        assert [m.y for m in markers] == [2.0, 3.0, 4.0]
        assert [m.side for m in markers] == [MarkerSide.BUY, MarkerSide.SELL, MarkerSide.SELL]

    def test_non_finite_price_dropped(self):
        candles = [_candle(0), _candle(60_000)]
        trades = [TradePoint(ts=10, side="BUY", price=math.nan)]
        assert align_trades_to_candles(candles, trades) == []

    def test_marker_keeps_trade(self):
        trade = TradePoint(ts=0, side="BUY", price=7.0, qty=1.0, pnl=0.5)
        [marker] = align_trades_to_candles([_candle(0)], [trade])
        assert marker.trade is trade


# ---------------------------------------------------------------------------
# Equity overlay
# ---------------------------------------------------------------------------

class TestAlignTradesToEquity:

    def test_anchored_at_preceding_equity(self):
        points = _equity((1_000, 100.0), (2_000, 105.0), (3_000, 103.0))
        trades = [
            TradePoint(ts=2_500, side="BUY", price=2001.0),
            TradePoint(ts=3_000, side="SELL", price=2002.0),
        ]
        markers = align_trades_to_equity(points, trades)
        assert [m.y for m in markers] == [105.0, 103.0]
        assert [m.ts for m in markers] == [2_500, 3_000]

    def test_trades_outside_range_are_kept(self):
        points = _equity((1_000, 100.0), (2_000, 105.0))
        trades = [
            TradePoint(ts=0, side="BUY", price=1.0),
            TradePoint(ts=9_999, side="SELL", price=1.0),
        ]
        markers = align_trades_to_equity(points, trades)
        assert [m.y for m in markers] == [100.0, 105.0]

    def test_empty_series_drops_everything(self):
        trades = [TradePoint(ts=0, side="BUY", price=1.0)]
        assert align_trades_to_equity([], trades) == []
