from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class EquityPoint:
    """
    One sample of account value at a point in time.

    Attributes:
        ts: Unix timestamp in milliseconds
        equity: Account value
        close: Underlying asset price at ``ts`` (None if not reported)
    """

    ts: int
    equity: float
    close: Optional[float] = None

    @property
    def price(self) -> float:
        """Price used for candle building: close when known, else equity."""
        return self.close if self.close is not None else self.equity


@dataclass(frozen=True)
class TradePoint:
    """
    An executed trade reported by a run.

    Attributes:
        ts: Unix timestamp in milliseconds
        side: Side token as reported ("BUY"/"SELL", any case)
        price: Execution price
        qty: Executed quantity (None if not reported)
        pnl: Realised P&L of the fill (None if not reported)
    """

    ts: int
    side: str
    price: float
    qty: Optional[float] = None
    pnl: Optional[float] = None


@dataclass(frozen=True)
class ChartPoint:
    """A data-space point for line charts."""

    x: float
    y: float
