from .coordinates import Bounds, CoordinateMapper, PixelPoint
from .svg import (
    render_candlestick_chart,
    render_line_chart,
    render_trade_overlay_chart,
)

__all__ = [
    "Bounds",
    "CoordinateMapper",
    "PixelPoint",
    "render_candlestick_chart",
    "render_line_chart",
    "render_trade_overlay_chart",
]
