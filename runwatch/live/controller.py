"""
Live refresh of a single run view.

The controller owns everything that changes while a run is watched: the
polling task, the identity token of the watched run, the latest committed
snapshot and the rolling live-ROI window. Nothing here is shared between
views of different runs.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Optional

from runwatch.api.base import RunsApi, RunwatchError
from runwatch.config import Settings
from runwatch.events import EventDispatcher
from runwatch.telemetry.extract import extract_metric
from runwatch.time_utils import now_ms

from .events import RefreshFailedEvent, SnapshotCommittedEvent
from .snapshot import RunSnapshot
from .window import LiveSample, LiveWindow

log = logging.getLogger(__name__)


__all__ = [
    "LiveRefreshController",
    "PollingState",
]


class PollingState(str, Enum):
    IDLE = "idle"
    POLLING = "polling"
    STOPPED = "stopped"


class LiveRefreshController:
    """
    Periodically refreshes one run and commits consistent snapshots.

    Each tick fetches run, events, metrics and artifacts concurrently and
    commits only after all four settle. A failed tick commits nothing and
    keeps the previous snapshot; polling carries on. The next tick is
    scheduled only after the current one completes, so ticks never overlap.

    Cadence follows the freshly fetched status: ``poll_active_s`` while the
    run is queued or running, ``poll_idle_s`` otherwise.

    Every tick carries the identity token current when it was issued. A
    tick whose token is stale by the time its fetches resolve (the view was
    stopped or switched to another run) is discarded without touching state.

    Usage:
        controller = LiveRefreshController(api, settings=settings)
        controller.start("3f2c...")
        ...
        controller.stop()
    """

    def __init__(
        self,
        api: RunsApi,
        *,
        settings: Optional[Settings] = None,
        dispatcher: Optional[EventDispatcher] = None,
        clock: Callable[[], int] = now_ms,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._api = api
        self._settings = settings or Settings()
        self.dispatcher = dispatcher or EventDispatcher()
        self._clock = clock
        self._sleep = sleep

        self.state = PollingState.IDLE
        self.run_id: Optional[str] = None
        self._token = 0
        self._task: Optional[asyncio.Task] = None

        self.snapshot: Optional[RunSnapshot] = None
        self.last_error: Optional[str] = None
        self.roi_window = LiveWindow("roi", max_length=self._settings.live_window)
        self.interval = self._settings.poll_active_s

    @property
    def token(self) -> int:
        """Identity token of the current view; bumped on every start/stop."""
        return self._token

    def start(self, run_id: str) -> None:
        """
        Begin polling *run_id*, replacing any run currently watched.

        Must be called from a running event loop. Switching to a different
        run resets the snapshot and the live window.

        Raises:
            RuntimeError: If the controller was stopped.
        """
        if self.state is PollingState.STOPPED:
            raise RuntimeError("controller is stopped; create a new one for a new view")

        self._cancel_task()
        self._token += 1

        if run_id != self.run_id:
            self.snapshot = None
            self.last_error = None
            self.roi_window.clear()
            self.interval = self._settings.poll_active_s

        self.run_id = run_id
        self.state = PollingState.POLLING
        self._task = asyncio.get_running_loop().create_task(
            self._poll_loop(self._token), name=f"runwatch-poll-{run_id}"
        )
        log.info("Polling run %s", run_id)

    def stop(self) -> None:
        """
        Stop polling unconditionally.

        The pending timer is cancelled and any fetch still in flight will be
        discarded when it resolves.
        """
        if self.state is PollingState.STOPPED:
            return
        self._token += 1
        self._cancel_task()
        self.state = PollingState.STOPPED
        log.info("Stopped polling run %s", self.run_id)

    async def join(self) -> None:
        """Wait for the polling task to finish (after :meth:`stop`)."""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    def _cancel_task(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def _poll_loop(self, token: int) -> None:
        while token == self._token:
            await self.refresh(token)
            if token != self._token:
                return
            await self._sleep(self.interval)

    async def refresh(self, token: Optional[int] = None) -> bool:
        """
        Run one tick.

        Args:
            token: Identity the tick belongs to (defaults to the current one)

        Returns:
            True if a snapshot was committed
        """
        if token is None:
            token = self._token
        run_id = self.run_id
        if run_id is None or self.state is not PollingState.POLLING:
            return False

        try:
            run, events, metrics, artifacts = await asyncio.gather(
                self._api.get_run(run_id),
                self._api.get_run_events(run_id),
                self._api.get_run_metrics(run_id),
                self._api.get_run_artifacts(run_id),
            )
        except RunwatchError as exc:
            return await self._fail(token, run_id, str(exc))
        except Exception as exc:
            log.exception("Unexpected error refreshing run %s", run_id)
            return await self._fail(token, run_id, str(exc) or type(exc).__name__)

        if token != self._token:
            log.debug("Discarding stale refresh of run %s", run_id)
            return False

        fetched_at = self._clock()
        snapshot = RunSnapshot(
            run=run,
            events=tuple(reversed(events)),
            metrics=metrics,
            artifacts=tuple(artifacts),
            fetched_at=fetched_at,
        )

        self.snapshot = snapshot
        self.last_error = None
        roi = extract_metric(metrics, "roi")
        if roi is not None:
            self.roi_window.append(LiveSample(ts=fetched_at, value=roi))
        self.interval = (
            self._settings.poll_active_s if run.is_active else self._settings.poll_idle_s
        )

        log.debug(
            "Run %s status=%s events=%d next_tick=%.1fs",
            run_id,
            run.status,
            len(snapshot.events),
            self.interval,
        )
        await self.dispatcher.publish(SnapshotCommittedEvent(run_id=run_id, snapshot=snapshot))
        return True

    async def _fail(self, token: int, run_id: str, message: str) -> bool:
        if token != self._token:
            log.debug("Discarding stale failure of run %s: %s", run_id, message)
            return False
        self.last_error = message
        log.warning("Refresh of run %s failed: %s", run_id, message)
        await self.dispatcher.publish(RefreshFailedEvent(run_id=run_id, error=message))
        return False

    def __repr__(self) -> str:
        return (
            f"LiveRefreshController(run_id={self.run_id}, state={self.state.value}, "
            f"interval={self.interval}s, roi_samples={len(self.roi_window)})"
        )
