from dataclasses import dataclass
from typing import Optional

from runwatch.api.models import RunArtifact, RunEventRecord, RunMetricsResponse, RunRecord


@dataclass(frozen=True)
class RunSnapshot:
    """
    Consistent view of one run taken by a single refresh tick.

    All four parts come from the same tick, so events are never shown
    against metrics from a different refresh.

    Attributes:
        run: Run record
        events: Events in chronological order (oldest first)
        metrics: Metrics snapshot, or None when the run has not reported any
        artifacts: Artifacts produced so far
        fetched_at: Commit time, Unix milliseconds
    """

    run: RunRecord
    events: tuple[RunEventRecord, ...]
    metrics: Optional[RunMetricsResponse]
    artifacts: tuple[RunArtifact, ...]
    fetched_at: int
