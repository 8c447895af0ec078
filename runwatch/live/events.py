from runwatch.events import DomainEvent, event

from .snapshot import RunSnapshot


@event
class SnapshotCommittedEvent(DomainEvent):
    """A tick completed and its snapshot replaced the previous one."""

    run_id: str
    snapshot: RunSnapshot


@event
class RefreshFailedEvent(DomainEvent):
    """A tick failed; the previous snapshot is still current."""

    run_id: str
    error: str
