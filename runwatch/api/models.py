"""Records exchanged with the run-orchestration service.

These are owned by the service; the client only decodes them and never
mutates them.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional


__all__ = [
    "PresetRequest",
    "RunArtifact",
    "RunEventRecord",
    "RunMetricsResponse",
    "RunRecord",
    "RunStatus",
]


class RunStatus(str, Enum):
    """Lifecycle state of a run as reported by the service."""
    QUEUED = "queued"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_active(self) -> bool:
        """True while the run is still progressing."""
        return self in (RunStatus.QUEUED, RunStatus.RUNNING)

    @classmethod
    def parse(cls, raw: Any) -> Optional["RunStatus"]:
        """Lenient decode; unknown statuses yield None rather than raising."""
        try:
            return cls(str(raw).lower())
        except ValueError:
            return None


def _opt_str(v: Any) -> Optional[str]:
    return None if v is None else str(v)


@dataclass(frozen=True)
class RunRecord:
    id: str
    name: str
    kind: str
    status: str
    created_at: str
    started_at: Optional[str] = None
    ended_at: Optional[str] = None
    exit_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def run_status(self) -> Optional[RunStatus]:
        return RunStatus.parse(self.status)

    @property
    def is_active(self) -> bool:
        """Queued or running. Unknown statuses count as not progressing."""
        status = self.run_status
        return status is not None and status.is_active

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> RunRecord:
        """
        Decode a run record.

        Raises ``ValueError`` when a required field is missing instead of
        letting ``KeyError`` propagate.
        """
        try:
            return cls(
                id=str(raw["id"]),
                name=str(raw.get("name", "")),
                kind=str(raw.get("kind", "")),
                status=str(raw["status"]),
                created_at=str(raw.get("created_at", "")),
                started_at=_opt_str(raw.get("started_at")),
                ended_at=_opt_str(raw.get("ended_at")),
                exit_code=int(raw["exit_code"]) if raw.get("exit_code") is not None else None,
                error=_opt_str(raw.get("error")),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"malformed run record: {exc}") from exc


@dataclass(frozen=True)
class RunEventRecord:
    """One structured log line emitted by a run."""

    id: int
    run_id: str
    ts: str
    level: str
    message: str

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> RunEventRecord:
        try:
            return cls(
                id=int(raw["id"]),
                run_id=str(raw.get("run_id", "")),
                ts=str(raw["ts"]),
                level=str(raw.get("level", "info")),
                message=str(raw.get("message", "")),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"malformed run event: {exc}") from exc


@dataclass(frozen=True)
class RunMetricsResponse:
    """Latest metrics snapshot of a run; ``payload`` is untyped telemetry."""

    run_id: str
    updated_at: Optional[str]
    payload: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> RunMetricsResponse:
        payload = raw.get("payload")
        return cls(
            run_id=str(raw.get("run_id", "")),
            updated_at=_opt_str(raw.get("updated_at")),
            payload=dict(payload) if isinstance(payload, Mapping) else {},
        )


@dataclass(frozen=True)
class RunArtifact:
    id: int
    run_id: str
    kind: str
    path: str
    created_at: str

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> RunArtifact:
        try:
            return cls(
                id=int(raw["id"]),
                run_id=str(raw.get("run_id", "")),
                kind=str(raw["kind"]),
                path=str(raw["path"]),
                created_at=str(raw.get("created_at", "")),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"malformed run artifact: {exc}") from exc


@dataclass(frozen=True)
class PresetRequest:
    """Parameters of the market-making multi-timeframe sweep preset."""

    symbol: str
    start: str
    end: str
    maker_fee_bps_list: str = "10"
    htf_interval: Optional[str] = None
    ltf_interval: Optional[str] = None
    top_n: Optional[int] = None

    def __post_init__(self) -> None:
        missing = [
            name for name in ("symbol", "start", "end") if not getattr(self, name).strip()
        ]
        if missing:
            raise ValueError(f"{', '.join(missing)} required")
        if self.top_n is not None and self.top_n < 1:
            raise ValueError(f"top_n must be >= 1, got {self.top_n}")

    def to_dict(self) -> dict[str, Any]:
        """JSON body; optional fields left unset are omitted."""
        return {k: v for k, v in asdict(self).items() if v is not None}
