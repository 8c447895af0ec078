"""Display model of a run detail view, derived from controller state."""

from dataclasses import dataclass, field
from typing import Optional

from runwatch.api.models import RunArtifact, RunEventRecord
from runwatch.charts.svg import (
    render_candlestick_chart,
    render_line_chart,
    render_trade_overlay_chart,
)
from runwatch.telemetry.aggregation import aggregate_candles
from runwatch.telemetry.candle import Candle
from runwatch.telemetry.extract import extract_equity_points, extract_metric, extract_trade_points
from runwatch.telemetry.points import ChartPoint, EquityPoint, TradePoint
from runwatch.time_utils import iso_to_ms, parse_timestamp

from .controller import LiveRefreshController
from .snapshot import RunSnapshot
from .window import LiveWindow


def format_metric(value: Optional[float], digits: int) -> str:
    return "-" if value is None else f"{value:.{digits}f}"


@dataclass(frozen=True)
class MetricSummary:
    roi: Optional[float] = None
    profit_factor: Optional[float] = None
    max_drawdown: Optional[float] = None

    def formatted(self) -> dict[str, str]:
        return {
            "ROI %": format_metric(self.roi, 2),
            "PF": format_metric(self.profit_factor, 3),
            "Max DD %": format_metric(self.max_drawdown, 2),
        }


def progress_points(events: tuple[RunEventRecord, ...]) -> list[ChartPoint]:
    """Events timeline: event time (ms) against the event sequence id."""
    out = []
    for e in events:
        try:
            ts = iso_to_ms(e.ts)
        except ValueError:
            continue
        out.append(ChartPoint(x=float(ts), y=float(e.id)))
    return out


def format_log_line(e: RunEventRecord) -> str:
    try:
        clock = parse_timestamp(e.ts).strftime("%H:%M:%S")
    except ValueError:
        clock = e.ts
    return f"{clock} [{e.level}] {e.message}"


@dataclass(frozen=True)
class RunDetailView:
    """Everything a renderer needs to draw one run, recomputed per snapshot."""

    run_id: str
    status: str = "-"
    kind: str = "-"
    error: Optional[str] = None
    summary: MetricSummary = field(default_factory=MetricSummary)
    progress: list[ChartPoint] = field(default_factory=list)
    roi_track: list[ChartPoint] = field(default_factory=list)
    equity: list[EquityPoint] = field(default_factory=list)
    trades: list[TradePoint] = field(default_factory=list)
    candles: list[Candle] = field(default_factory=list)
    artifacts: tuple[RunArtifact, ...] = ()
    log_lines: list[str] = field(default_factory=list)

    @classmethod
    def build(
        cls,
        run_id: str,
        snapshot: Optional[RunSnapshot],
        roi_window: LiveWindow,
        error: Optional[str] = None,
    ) -> "RunDetailView":
        if snapshot is None:
            return cls(run_id=run_id, error=error, roi_track=roi_window.to_chart_points())

        metrics = snapshot.metrics
        payload = metrics.payload if metrics is not None else None
        equity = extract_equity_points(payload)

        return cls(
            run_id=run_id,
            status=snapshot.run.status,
            kind=snapshot.run.kind,
            error=error,
            summary=MetricSummary(
                roi=extract_metric(metrics, "roi"),
                profit_factor=extract_metric(metrics, "profit_factor"),
                max_drawdown=extract_metric(metrics, "max_drawdown"),
            ),
            progress=progress_points(snapshot.events),
            roi_track=roi_window.to_chart_points(),
            equity=equity,
            trades=extract_trade_points(payload),
            candles=aggregate_candles(equity),
            artifacts=snapshot.artifacts,
            log_lines=[format_log_line(e) for e in snapshot.events],
        )

    @classmethod
    def from_controller(cls, controller: LiveRefreshController) -> "RunDetailView":
        if controller.run_id is None:
            raise ValueError("controller has not been started")
        return cls.build(
            controller.run_id,
            controller.snapshot,
            controller.roi_window,
            error=controller.last_error,
        )

    def render_charts(self) -> dict[str, str]:
        """Chart fragments keyed by a file-friendly name."""
        return {
            "progress": render_line_chart(self.progress, y_label="Events", color="#3b82f6"),
            "roi": render_line_chart(self.roi_track, y_label="ROI %", color="#17c964"),
            "equity": render_trade_overlay_chart(self.equity, self.trades),
            "candles": render_candlestick_chart(self.candles, self.trades),
        }
