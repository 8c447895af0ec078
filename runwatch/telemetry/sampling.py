from typing import Sequence, TypeVar

T = TypeVar("T")

# Caps applied by the run service when it snapshots chart artifacts.
MAX_EQUITY_POINTS = 800
MAX_TRADE_POINTS = 1200


def sample_evenly(points: Sequence[T], max_points: int) -> list[T]:
    """
    Decimate *points* to at most *max_points*, keeping first and last.

    Indices are spread evenly over the sequence so the shape of a long
    series survives. A cap below 2 keeps only the final point.
    """
    n = len(points)
    if n <= max_points:
        return list(points)
    if max_points < 2:
        return [points[-1]]

    span = n - 1
    return [points[i * span // (max_points - 1)] for i in range(max_points)]
