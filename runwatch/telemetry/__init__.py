from .aggregation import aggregate_candles, choose_bucket_width
from .alignment import (
    MarkerSide,
    TradeMarker,
    align_trades_to_candles,
    align_trades_to_equity,
    classify_side,
    nearest_preceding,
)
from .candle import Candle
from .extract import extract_equity_points, extract_metric, extract_trade_points
from .numeric import normalize_ts_ms, to_number
from .points import ChartPoint, EquityPoint, TradePoint
from .sampling import sample_evenly

__all__ = [
    "Candle",
    "ChartPoint",
    "EquityPoint",
    "MarkerSide",
    "TradeMarker",
    "TradePoint",
    "aggregate_candles",
    "align_trades_to_candles",
    "align_trades_to_equity",
    "choose_bucket_width",
    "classify_side",
    "extract_equity_points",
    "extract_metric",
    "extract_trade_points",
    "nearest_preceding",
    "normalize_ts_ms",
    "sample_evenly",
    "to_number",
]
