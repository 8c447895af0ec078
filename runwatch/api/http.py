"""aiohttp implementation of :class:`RunsApi`."""

import asyncio
import logging
from typing import Any, Optional

import aiohttp

from runwatch.config import Settings

from .base import ApiError, ConfigurationError, RunsApi
from .models import (
    PresetRequest,
    RunArtifact,
    RunEventRecord,
    RunMetricsResponse,
    RunRecord,
)

log = logging.getLogger(__name__)


__all__ = [
    "HttpRunsClient",
]


class HttpRunsClient(RunsApi):
    """
    JSON-over-HTTP client for the run-orchestration service.

    Runs and events are required: any failure raises :class:`ApiError`.
    Metrics and artifacts are best-effort: failures are logged at DEBUG and
    reported as "no data yet" (None / empty list).

    Usage:
        async with HttpRunsClient(Settings.from_env()) as api:
            runs = await api.list_runs()
    """

    def __init__(self, settings: Settings, *, session: Optional[aiohttp.ClientSession] = None):
        self._settings = settings
        self._session = session
        self._owns_session = session is None

    @property
    def base_url(self) -> str:
        base = (self._settings.api_base_url or "").strip()
        if not base:
            raise ConfigurationError(
                "API base URL is not set (RUNWATCH_API_BASE_URL)"
            )
        return base.rstrip("/")

    async def start(self) -> None:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._settings.request_timeout_s),
                headers={"content-type": "application/json"},
            )
            self._owns_session = True

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    async def _request(self, method: str, path: str, *, body: Any = None) -> Any:
        # Configuration is checked before touching the network.
        url = f"{self.base_url}{path}"
        if self._session is None:
            await self.start()
        assert self._session is not None

        kwargs: dict[str, Any] = {}
        if body is not None:
            kwargs["json"] = body

        try:
            async with self._session.request(method, url, **kwargs) as resp:
                if resp.status < 200 or resp.status >= 300:
                    text = await resp.text()
                    raise ApiError(resp.status, text)
                try:
                    return await resp.json(content_type=None)
                except ValueError as exc:
                    raise ApiError(resp.status, f"invalid JSON: {exc}") from exc
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise ApiError(None, f"{method} {path}: {str(exc) or type(exc).__name__}") from exc

    @staticmethod
    def _decode_list(raw: Any, decoder, path: str) -> list:
        if not isinstance(raw, list):
            raise ApiError(200, f"expected a list from {path}")
        try:
            return [decoder(r) for r in raw]
        except (ValueError, TypeError, AttributeError) as exc:
            raise ApiError(200, f"malformed response from {path}: {exc}") from exc

    async def list_runs(self) -> list[RunRecord]:
        path = f"/runs?limit={self._settings.runs_limit}"
        return self._decode_list(await self._request("GET", path), RunRecord.from_dict, path)

    async def get_run(self, run_id: str) -> RunRecord:
        path = f"/runs/{run_id}"
        raw = await self._request("GET", path)
        try:
            return RunRecord.from_dict(raw)
        except (ValueError, TypeError, AttributeError) as exc:
            raise ApiError(200, f"malformed response from {path}: {exc}") from exc

    async def get_run_events(self, run_id: str) -> list[RunEventRecord]:
        path = f"/runs/{run_id}/events?limit={self._settings.events_limit}"
        return self._decode_list(await self._request("GET", path), RunEventRecord.from_dict, path)

    async def get_run_metrics(self, run_id: str) -> Optional[RunMetricsResponse]:
        path = f"/runs/{run_id}/metrics"
        try:
            raw = await self._request("GET", path)
            return RunMetricsResponse.from_dict(raw)
        except (ApiError, AttributeError, TypeError) as exc:
            log.debug("No metrics for run %s: %s", run_id, exc)
            return None

    async def get_run_artifacts(self, run_id: str) -> list[RunArtifact]:
        path = f"/runs/{run_id}/artifacts"
        try:
            return self._decode_list(await self._request("GET", path), RunArtifact.from_dict, path)
        except ApiError as exc:
            log.debug("No artifacts for run %s: %s", run_id, exc)
            return []

    async def create_mm_mtf_sweep_preset(self, request: PresetRequest) -> RunRecord:
        path = "/runs/presets/mm_mtf_sweep"
        raw = await self._request("POST", path, body=request.to_dict())
        try:
            return RunRecord.from_dict(raw)
        except (ValueError, TypeError, AttributeError) as exc:
            raise ApiError(200, f"malformed response from {path}: {exc}") from exc
