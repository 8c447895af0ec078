from .controller import LiveRefreshController, PollingState
from .events import RefreshFailedEvent, SnapshotCommittedEvent
from .run_list import RunListPoller, count_active
from .snapshot import RunSnapshot
from .view import MetricSummary, RunDetailView
from .window import LiveSample, LiveWindow

__all__ = [
    "LiveRefreshController",
    "LiveSample",
    "LiveWindow",
    "MetricSummary",
    "PollingState",
    "RefreshFailedEvent",
    "RunDetailView",
    "RunListPoller",
    "RunSnapshot",
    "SnapshotCommittedEvent",
    "count_active",
]
