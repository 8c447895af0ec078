# tests/conftest.py
import asyncio
import os
import sys
from unittest.mock import AsyncMock, MagicMock

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from runwatch.api.base import RunsApi
from runwatch.api.models import (
    RunArtifact,
    RunEventRecord,
    RunMetricsResponse,
    RunRecord,
)
from runwatch.config import Settings


def make_run(run_id="run-1", status="running", kind="backtest_mm_mtf_sweep"):
    return RunRecord(
        id=run_id,
        name=f"mm_mtf_sweep {run_id}",
        kind=kind,
        status=status,
        created_at="2026-01-01T00:00:00Z",
    )


def make_events(run_id="run-1", n=3):
    """Events as served by the API: newest first."""
    return [
        RunEventRecord(
            id=i,
            run_id=run_id,
            ts=f"2026-01-01T00:00:{i:02d}Z",
            level="info",
            message=f"step {i}",
        )
        for i in range(n, 0, -1)
    ]


def make_metrics(run_id="run-1", **payload):
    return RunMetricsResponse(run_id=run_id, updated_at="2026-01-01T00:01:00Z", payload=payload)


class FakeRunsApi(RunsApi):
    """In-memory RunsApi.

    - ``statuses`` are consumed one per get_run call; the last one repeats.
    - ``errors`` are raised by get_run, one per call, before statuses.
    - ``gate`` (when set) blocks get_run until the event is set.
    """

    def __init__(self, statuses=("running",), *, events=None, metrics=None, artifacts=None):
        self.statuses = list(statuses)
        self.events = events if events is not None else make_events()
        self.metrics = metrics
        self.artifacts = artifacts or []
        self.errors: list[Exception] = []
        self.gate: asyncio.Event | None = None
        self.calls: list[tuple[str, str]] = []
        self.started = False
        self.closed = False

    async def start(self):
        self.started = True

    async def close(self):
        self.closed = True

    async def list_runs(self):
        return [make_run()]

    async def get_run(self, run_id):
        self.calls.append(("get_run", run_id))
        if self.gate is not None:
            await self.gate.wait()
        if self.errors:
            raise self.errors.pop(0)
        status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
        return make_run(run_id, status)

    async def get_run_events(self, run_id):
        self.calls.append(("get_run_events", run_id))
        return list(self.events)

    async def get_run_metrics(self, run_id):
        self.calls.append(("get_run_metrics", run_id))
        return self.metrics

    async def get_run_artifacts(self, run_id):
        self.calls.append(("get_run_artifacts", run_id))
        return list(self.artifacts)

    async def create_mm_mtf_sweep_preset(self, request):
        return make_run("new-run", "queued")


class ManualSleep:
    """Replacement for asyncio.sleep that records intervals and waits to be released."""

    def __init__(self):
        self.intervals: list[float] = []
        self._waiters: list[asyncio.Future] = []
        self._credits = 0

    async def __call__(self, seconds: float) -> None:
        self.intervals.append(seconds)
        if self._credits:
            # released before the sleeper arrived
            self._credits -= 1
            return
        fut = asyncio.get_running_loop().create_future()
        self._waiters.append(fut)
        await fut

    def release(self) -> None:
        while self._waiters:
            fut = self._waiters.pop(0)
            if not fut.done():
                fut.set_result(None)
                return
        self._credits += 1


@pytest.fixture
def settings():
    return Settings(api_base_url="http://api.test")


@pytest.fixture
def fake_api():
    return FakeRunsApi()


@pytest.fixture
def manual_sleep():
    return ManualSleep()


@pytest.fixture
def wait_for():
    """Yield to the event loop until *predicate* holds."""

    async def _wait_for(predicate, attempts=500):
        for _ in range(attempts):
            if predicate():
                return
            await asyncio.sleep(0)
        raise AssertionError("condition not reached")

    return _wait_for


class AsyncContextManagerMock:
    """Helper class to mock async context managers."""
    def __init__(self, return_value=None):
        self.return_value = return_value or MagicMock()

    async def __aenter__(self):
        return self.return_value

    async def __aexit__(self, *args):
        return None


@pytest.fixture
def mock_http_response():
    """Create a mock HTTP response."""
    mock_response = MagicMock()
    mock_response.status = 200
    mock_response.json = AsyncMock(return_value={})
    mock_response.text = AsyncMock(return_value="")
    return mock_response


@pytest.fixture
def mock_aiohttp_session(mock_http_response):
    """Mock aiohttp ClientSession."""
    response_context = AsyncContextManagerMock(mock_http_response)

    mock_session = MagicMock()
    mock_session.request = MagicMock(return_value=response_context)
    mock_session.close = AsyncMock()

    return mock_session
