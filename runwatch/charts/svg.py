"""SVG rendering of run charts as embeddable HTML fragments.

Every chart scales through :class:`CoordinateMapper`. An empty primary
series renders a "no data" placeholder instead of an empty canvas; trade
data never affects that decision.
"""

from typing import Sequence
from xml.sax.saxutils import escape, quoteattr

from runwatch.telemetry.alignment import (
    MarkerSide,
    TradeMarker,
    align_trades_to_candles,
    align_trades_to_equity,
)
from runwatch.telemetry.candle import Candle
from runwatch.telemetry.points import ChartPoint, EquityPoint, TradePoint
from runwatch.telemetry.sampling import MAX_EQUITY_POINTS, MAX_TRADE_POINTS, sample_evenly

from .coordinates import Bounds, CoordinateMapper


__all__ = [
    "NO_CANDLES",
    "NO_CHART_DATA",
    "NO_EQUITY",
    "render_candlestick_chart",
    "render_line_chart",
    "render_trade_overlay_chart",
]


NO_CHART_DATA = "No chart data yet"
NO_CANDLES = "No candle data yet"
NO_EQUITY = "No equity data yet"

BULL_COLOR = "#22c55e"
BEAR_COLOR = "#ef4444"
MARKER_COLORS = {
    MarkerSide.BUY: "#3b82f6",
    MarkerSide.SELL: "#f97316",
}


def _placeholder(message: str) -> str:
    return f'<div class="muted">{escape(message)}</div>'


def _open_svg(width: float, height: float, label: str) -> list[str]:
    return [
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {width:g} {height:g}" '
        f'class="chart" aria-label={quoteattr(label)}>',
        f'<rect x="0" y="0" width="{width:g}" height="{height:g}" fill="transparent" />',
    ]


def _y_labels(bounds: Bounds) -> str:
    return (
        f'<div class="row-between tiny muted"><span>{bounds.min_y:.2f}</span>'
        f"<span>{bounds.max_y:.2f}</span></div>"
    )


def _path(mapper: CoordinateMapper, points: Sequence[ChartPoint], bounds: Bounds) -> str:
    pixels = mapper.map(points, bounds)
    return " ".join(
        f"{'M' if i == 0 else 'L'}{p.x:.2f},{p.y:.2f}" for i, p in enumerate(pixels)
    )


def _markers(
    mapper: CoordinateMapper, markers: Sequence[TradeMarker], bounds: Bounds, radius: float
) -> list[str]:
    out = []
    for m in markers:
        cx = mapper.to_x(m.ts, bounds)
        cy = mapper.to_y(m.y, bounds)
        out.append(
            f'<circle class="trade {m.side.value}" cx="{cx:.2f}" cy="{cy:.2f}" '
            f'r="{radius:g}" fill="{MARKER_COLORS[m.side]}" />'
        )
    return out


def render_line_chart(
    points: Sequence[ChartPoint],
    *,
    width: float = 720,
    height: float = 160,
    color: str = "#17c964",
    y_label: str | None = None,
) -> str:
    """Render a single line series, e.g. the events timeline or live ROI."""
    if not points:
        return _placeholder(NO_CHART_DATA)

    mapper = CoordinateMapper(width, height)
    bounds = mapper.fit(points)

    parts = []
    if y_label:
        parts.append(f'<div class="label">{escape(y_label)}</div>')
    parts.extend(_open_svg(width, height, y_label or "chart"))
    parts.append(
        f'<path d="{_path(mapper, points, bounds)}" stroke="{color}" '
        f'stroke-width="2.5" fill="none" />'
    )
    parts.append("</svg>")
    parts.append(_y_labels(bounds))
    return "\n".join(parts)


def render_candlestick_chart(
    candles: Sequence[Candle],
    trades: Sequence[TradePoint] = (),
    *,
    width: float = 900,
    height: float = 260,
) -> str:
    """Render OHLC candles with BUY/SELL markers at their execution price."""
    if not candles:
        return _placeholder(NO_CANDLES)

    mapper = CoordinateMapper(width, height)
    bounds = Bounds(
        min_x=candles[0].ts,
        max_x=candles[-1].ts,
        min_y=min(c.low for c in candles),
        max_y=max(c.high for c in candles),
    )

    slot = (width - 2 * mapper.margin) / max(len(candles), 1)
    body_width = max(2.0, min(10.0, slot * 0.7))

    parts = ['<div class="label">Candles (OHLC) + BUY/SELL markers</div>']
    parts.extend(_open_svg(width, height, "candlestick chart"))
    for c in candles:
        x = mapper.to_x(c.ts, bounds)
        open_y = mapper.to_y(c.open, bounds)
        close_y = mapper.to_y(c.close, bounds)
        body_y = min(open_y, close_y)
        body_h = max(1.0, abs(close_y - open_y))
        color = BULL_COLOR if c.bullish else BEAR_COLOR
        parts.append(
            f'<g class="candle {"bull" if c.bullish else "bear"}">'
            f'<line x1="{x:.2f}" y1="{mapper.to_y(c.high, bounds):.2f}" '
            f'x2="{x:.2f}" y2="{mapper.to_y(c.low, bounds):.2f}" stroke="{color}" stroke-width="1.2" />'
            f'<rect x="{x - body_width / 2:.2f}" y="{body_y:.2f}" width="{body_width:.2f}" '
            f'height="{body_h:.2f}" fill="{color}" /></g>'
        )

    markers = align_trades_to_candles(candles, sample_evenly(trades, MAX_TRADE_POINTS))
    parts.extend(_markers(mapper, markers, bounds, radius=2.6))
    parts.append("</svg>")
    parts.append(_y_labels(bounds))
    return "\n".join(parts)


def render_trade_overlay_chart(
    equity: Sequence[EquityPoint],
    trades: Sequence[TradePoint] = (),
    *,
    width: float = 900,
    height: float = 220,
) -> str:
    """
    Render the equity curve with trades anchored on it.

    Bounds and trade anchors use the full series; only the drawn line is
    decimated.
    """
    if not equity:
        return _placeholder(NO_EQUITY)

    mapper = CoordinateMapper(width, height)
    bounds = Bounds(
        min_x=equity[0].ts,
        max_x=equity[-1].ts,
        min_y=min(p.equity for p in equity),
        max_y=max(p.equity for p in equity),
    )
    line = [ChartPoint(p.ts, p.equity) for p in sample_evenly(equity, MAX_EQUITY_POINTS)]

    parts = ['<div class="label">Equity + BUY/SELL markers</div>']
    parts.extend(_open_svg(width, height, "equity and trades chart"))
    parts.append(
        f'<path d="{_path(mapper, line, bounds)}" stroke="{BULL_COLOR}" '
        f'stroke-width="2.2" fill="none" />'
    )
    markers = align_trades_to_equity(equity, sample_evenly(trades, MAX_TRADE_POINTS))
    parts.extend(_markers(mapper, markers, bounds, radius=2.8))
    parts.append("</svg>")
    return "\n".join(parts)
