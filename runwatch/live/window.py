from collections import deque
from dataclasses import dataclass
from typing import Optional

import numpy as np

from runwatch.telemetry.points import ChartPoint


DEFAULT_MAX_LENGTH = 120


@dataclass(frozen=True)
class LiveSample:
    """A client-side sample of a metric, taken at poll time (ms)."""
    ts: int
    value: float


class LiveWindow:
    """
    Maintains a rolling window of live samples for one run view.

    The window has no server-side equivalent: it starts empty when the view
    is created and is never recovered. Memory is bounded by dropping the
    oldest sample once ``max_length`` is reached.

    Example:
        window = LiveWindow("roi", max_length=120)
        window.append(LiveSample(ts=now_ms(), value=3.2))
        points = window.to_chart_points(count=20)  # Last 20 samples only
    """

    def __init__(self, metric: str, max_length: int = DEFAULT_MAX_LENGTH):
        """
        Initialize live window.

        Args:
            metric: Name of the sampled metric (e.g. "roi")
            max_length: Maximum number of samples to retain
        """
        self.metric = metric
        self.max_length = max_length
        self.samples: deque[LiveSample] = deque(maxlen=max_length)

    def append(self, sample: LiveSample) -> None:
        """
        Add a sample.

        Automatically evicts the oldest sample if at max_length.
        """
        self.samples.append(sample)

    def clear(self) -> None:
        self.samples.clear()

    def get_samples(self, count: Optional[int] = None) -> list[LiveSample]:
        """
        Get sample objects.

        Args:
            count: Number of most recent samples to return (None = all)

        Returns:
            List of samples, oldest first
        """
        if count is None:
            return list(self.samples)
        return list(self.samples)[-count:]

    def get_timestamps(self, count: Optional[int] = None) -> np.ndarray:
        """Get array of sample timestamps (ms)."""
        samples = self.get_samples(count)
        return np.array([s.ts for s in samples], dtype=np.int64)

    def get_values(self, count: Optional[int] = None) -> np.ndarray:
        """Get array of sample values."""
        samples = self.get_samples(count)
        return np.array([s.value for s in samples], dtype=np.float64)

    def to_chart_points(self, count: Optional[int] = None) -> list[ChartPoint]:
        """Samples as line-chart points (x = ts in ms), oldest first."""
        xs = self.get_timestamps(count).astype(np.float64)
        ys = self.get_values(count)
        return [ChartPoint(x=float(x), y=float(y)) for x, y in zip(xs, ys)]

    def __len__(self) -> int:
        return len(self.samples)

    def __repr__(self) -> str:
        return f"LiveWindow(metric={self.metric}, samples={len(self)}/{self.max_length})"
