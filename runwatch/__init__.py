# runwatch/__init__.py
"""
Runwatch - live telemetry for backtest and sweep runs.

Polls a run-orchestration service, normalises loosely-typed metrics into
time series, and renders progress, ROI, equity and OHLC charts with trade
markers while a run is in flight.
"""

from .api import HttpRunsClient, RunsApi
from .config import Settings
from .live import LiveRefreshController, RunDetailView
from .runner import configure_logging, watch_run
from .telemetry import Candle, EquityPoint, TradePoint, aggregate_candles

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Candle",
    "EquityPoint",
    "HttpRunsClient",
    "LiveRefreshController",
    "RunDetailView",
    "RunsApi",
    "Settings",
    "TradePoint",
    "aggregate_candles",
    "configure_logging",
    "watch_run",
]
