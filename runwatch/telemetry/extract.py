"""Typed time series from semi-structured metrics payloads.

Metrics are best-effort telemetry: a run may not have emitted them yet and
the upstream schema evolves. Every function here is total. Malformed
elements are dropped and a missing or mistyped payload yields an empty
result.
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .numeric import normalize_ts_ms, to_number
from .points import EquityPoint, TradePoint

if TYPE_CHECKING:
    from runwatch.api.models import RunMetricsResponse


__all__ = [
    "EQUITY_KEY",
    "TRADES_KEY",
    "extract_equity_points",
    "extract_metric",
    "extract_trade_points",
]


EQUITY_KEY = "chart_equity"
TRADES_KEY = "chart_trades"


def _records(payload: Mapping[str, Any] | None, key: str) -> list[Mapping[str, Any]]:
    if not isinstance(payload, Mapping):
        return []
    raw = payload.get(key)
    if not isinstance(raw, (list, tuple)):
        return []
    return [r for r in raw if isinstance(r, Mapping)]


def extract_equity_points(payload: Mapping[str, Any] | None) -> list[EquityPoint]:
    """
    Extract the equity curve from ``payload["chart_equity"]``.

    Each element needs numeric ``ts`` and ``equity``; ``close`` is optional.
    Second-resolution timestamps are scaled to milliseconds.

    Returns:
        Points sorted ascending by timestamp (stable, duplicates kept)
    """
    out: list[EquityPoint] = []
    for rec in _records(payload, EQUITY_KEY):
        ts = to_number(rec.get("ts"))
        equity = to_number(rec.get("equity"))
        if ts is None or equity is None:
            continue
        out.append(
            EquityPoint(
                ts=normalize_ts_ms(ts),
                equity=equity,
                close=to_number(rec.get("close")),
            )
        )
    out.sort(key=lambda p: p.ts)
    return out


def extract_trade_points(payload: Mapping[str, Any] | None) -> list[TradePoint]:
    """
    Extract executed trades from ``payload["chart_trades"]``.

    Each element needs numeric ``ts`` and ``price`` and a string ``side``;
    ``qty`` and ``pnl`` are optional. Side case is preserved here.

    Returns:
        Trades sorted ascending by timestamp
    """
    out: list[TradePoint] = []
    for rec in _records(payload, TRADES_KEY):
        ts = to_number(rec.get("ts"))
        price = to_number(rec.get("price"))
        side = rec.get("side")
        if ts is None or price is None or not isinstance(side, str):
            continue
        out.append(
            TradePoint(
                ts=normalize_ts_ms(ts),
                side=side,
                price=price,
                qty=to_number(rec.get("qty")),
                pnl=to_number(rec.get("pnl")),
            )
        )
    out.sort(key=lambda t: t.ts)
    return out


def extract_metric(metrics: "RunMetricsResponse | None", key: str) -> float | None:
    """Return a scalar metric (e.g. ``roi``) from a metrics response, or None."""
    if metrics is None:
        return None
    payload = metrics.payload
    if not isinstance(payload, Mapping):
        return None
    return to_number(payload.get(key))
