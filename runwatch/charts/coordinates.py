"""Linear data-space to pixel-space mapping shared by every chart."""

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

import numpy as np

from runwatch.telemetry.points import ChartPoint


__all__ = [
    "Bounds",
    "CoordinateMapper",
    "PixelPoint",
]


@dataclass(frozen=True)
class PixelPoint:
    x: float
    y: float


@dataclass(frozen=True)
class Bounds:
    """Data-space extent of a chart. Zero-width ranges scale as 1."""

    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def range_x(self) -> float:
        return (self.max_x - self.min_x) or 1.0

    @property
    def range_y(self) -> float:
        return (self.max_y - self.min_y) or 1.0

    @classmethod
    def of(cls, xs: Iterable[float], ys: Iterable[float]) -> "Bounds":
        """Bounds covering the given coordinates. Raises ValueError if empty."""
        xa = np.fromiter(xs, dtype=np.float64)
        ya = np.fromiter(ys, dtype=np.float64)
        if xa.size == 0 or ya.size == 0:
            raise ValueError("cannot compute bounds of an empty series")
        return cls(
            min_x=float(xa.min()),
            max_x=float(xa.max()),
            min_y=float(ya.min()),
            max_y=float(ya.max()),
        )


class CoordinateMapper:
    """
    Maps data points onto a fixed-size canvas with a margin on every edge.

    The Y axis is inverted: larger data values sit higher on screen, i.e. at
    smaller pixel coordinates.

    Example:
        mapper = CoordinateMapper(720, 160)
        bounds = mapper.fit(points)
        pixels = mapper.map(points, bounds)
    """

    def __init__(self, width: float, height: float, margin: float = 10.0):
        if width <= 2 * margin or height <= 2 * margin:
            raise ValueError(
                f"canvas {width}x{height} too small for margin {margin}"
            )
        self.width = float(width)
        self.height = float(height)
        self.margin = float(margin)

    def fit(self, points: Sequence[ChartPoint]) -> Bounds:
        return Bounds.of((p.x for p in points), (p.y for p in points))

    def to_x(self, x: float, bounds: Bounds) -> float:
        return (x - bounds.min_x) / bounds.range_x * (self.width - 2 * self.margin) + self.margin

    def to_y(self, y: float, bounds: Bounds) -> float:
        return self.height - (
            (y - bounds.min_y) / bounds.range_y * (self.height - 2 * self.margin) + self.margin
        )

    def map(
        self, points: Sequence[ChartPoint], bounds: Optional[Bounds] = None
    ) -> list[PixelPoint]:
        """
        Map *points* to pixel space.

        Args:
            points: Non-empty data-space points
            bounds: Shared bounds; fitted to *points* when None

        Returns:
            One PixelPoint per input point, in input order
        """
        if bounds is None:
            bounds = self.fit(points)

        xs = np.array([p.x for p in points], dtype=np.float64)
        ys = np.array([p.y for p in points], dtype=np.float64)

        px = (xs - bounds.min_x) / bounds.range_x * (self.width - 2 * self.margin) + self.margin
        py = self.height - ((ys - bounds.min_y) / bounds.range_y * (self.height - 2 * self.margin) + self.margin)

        return [PixelPoint(float(x), float(y)) for x, y in zip(px, py)]
