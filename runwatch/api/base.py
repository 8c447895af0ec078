"""
Client interface to the run-orchestration service.

Consumers (controllers, CLI) depend on :class:`RunsApi` only; the HTTP
implementation lives in :mod:`runwatch.api.http` and tests substitute
in-memory fakes.
"""

import abc
from typing import Optional

from .models import (
    PresetRequest,
    RunArtifact,
    RunEventRecord,
    RunMetricsResponse,
    RunRecord,
)


__all__ = [
    "ApiError",
    "ConfigurationError",
    "RunsApi",
    "RunwatchError",
]


class RunwatchError(Exception):
    """Base class for errors surfaced to the viewer."""


class ConfigurationError(RunwatchError):
    """Raised before any network attempt when the service URL is not configured."""


class ApiError(RunwatchError):
    """Raised when a required endpoint fails (non-2xx status or transport error)."""

    def __init__(self, status: Optional[int], body: str):
        self.status = status
        self.body = body
        if status is None:
            super().__init__(f"API unreachable: {body}")
        else:
            super().__init__(f"API {status}: {body}")


class RunsApi(abc.ABC):
    """Abstract base for run-orchestration service clients."""

    @abc.abstractmethod
    async def start(self) -> None:
        """Initialise the client (e.g. open an HTTP session)."""
        raise NotImplementedError

    @abc.abstractmethod
    async def close(self) -> None:
        """Close any underlying resources."""
        raise NotImplementedError

    @abc.abstractmethod
    async def list_runs(self) -> list[RunRecord]:
        """Fetch the most recent runs, newest first."""
        raise NotImplementedError

    @abc.abstractmethod
    async def get_run(self, run_id: str) -> RunRecord:
        """
        Fetch a single run.

        Raises:
            ApiError: If the service responds with a non-2xx status.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def get_run_events(self, run_id: str) -> list[RunEventRecord]:
        """
        Fetch the latest events of a run, newest first as served.

        Raises:
            ApiError: If the service responds with a non-2xx status.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def get_run_metrics(self, run_id: str) -> Optional[RunMetricsResponse]:
        """Fetch the metrics snapshot, or None when unavailable. Never raises ApiError."""
        raise NotImplementedError

    @abc.abstractmethod
    async def get_run_artifacts(self, run_id: str) -> list[RunArtifact]:
        """Fetch the artifacts of a run; empty when unavailable. Never raises ApiError."""
        raise NotImplementedError

    @abc.abstractmethod
    async def create_mm_mtf_sweep_preset(self, request: PresetRequest) -> RunRecord:
        """Queue a market-making MTF sweep run and return its record."""
        raise NotImplementedError

    async def __aenter__(self) -> "RunsApi":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
