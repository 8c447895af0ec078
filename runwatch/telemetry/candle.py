from dataclasses import dataclass


@dataclass(frozen=True)
class Candle:
    """
    Represents a single OHLC candle built from equity samples.

    Attributes:
        ts: Bucket start, Unix milliseconds
        open: Price of the first sample in the bucket
        high: Highest price in the bucket
        low: Lowest price in the bucket
        close: Price of the last sample in the bucket
    """

    ts: int
    open: float
    high: float
    low: float
    close: float

    @property
    def bullish(self) -> bool:
        """True when the candle closed at or above its open."""
        return self.close >= self.open

    def __repr__(self) -> str:
        return (
            f"Candle(ts={self.ts}, "
            f"O={self.open:.5f}, H={self.high:.5f}, "
            f"L={self.low:.5f}, C={self.close:.5f})"
        )
