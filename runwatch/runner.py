"""
Long-running watch loops and their logging setup.
"""

import asyncio
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Optional

from runwatch.api.base import RunsApi
from runwatch.api.http import HttpRunsClient
from runwatch.config import Settings
from runwatch.live.controller import LiveRefreshController
from runwatch.live.events import RefreshFailedEvent, SnapshotCommittedEvent
from runwatch.live.view import RunDetailView
from runwatch.telemetry.extract import extract_metric


log = logging.getLogger(__name__)


__all__ = [
    "configure_logging",
    "watch_run",
]


def configure_logging(level: str = "INFO", force: bool = False) -> None:
    """Attach a stdout handler to the root logger unless one is already set (or *force*)."""
    root_logger = logging.getLogger()

    if root_logger.hasHandlers() and not force:
        return

    root_logger.setLevel(level.upper())

    if force:
        root_logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


class SvgWriter:
    """Writes chart fragments of the watched run to a directory on every commit."""

    def __init__(self, controller: LiveRefreshController, out_dir: Path):
        self._controller = controller
        self._out_dir = out_dir

    async def on_commit(self, event: SnapshotCommittedEvent) -> None:
        view = RunDetailView.from_controller(self._controller)
        # disk writes run off the event loop
        await asyncio.to_thread(self._write, view.render_charts())

    def _write(self, fragments: dict[str, str]) -> None:
        self._out_dir.mkdir(parents=True, exist_ok=True)
        for name, fragment in fragments.items():
            (self._out_dir / f"{name}.html").write_text(fragment, encoding="utf-8")


def _log_commit(event: SnapshotCommittedEvent) -> None:
    snap = event.snapshot
    roi = extract_metric(snap.metrics, "roi")
    summary = f" roi={roi:.2f}" if roi is not None else ""
    latest = snap.events[-1].message if snap.events else "-"
    log.info(
        "[%s] %s events=%d artifacts=%d%s | %s",
        event.run_id,
        snap.run.status,
        len(snap.events),
        len(snap.artifacts),
        summary,
        latest,
    )


def _log_failure(event: RefreshFailedEvent) -> None:
    log.error("[%s] %s", event.run_id, event.error)


async def _watch(
    api: RunsApi,
    run_id: str,
    settings: Settings,
    svg_dir: Optional[Path],
    until_done: bool,
) -> None:
    controller = LiveRefreshController(api, settings=settings)
    controller.dispatcher.subscribe(SnapshotCommittedEvent, _log_commit)
    controller.dispatcher.subscribe(RefreshFailedEvent, _log_failure)
    if svg_dir is not None:
        writer = SvgWriter(controller, svg_dir)
        controller.dispatcher.subscribe(SnapshotCommittedEvent, writer.on_commit)

    done = asyncio.Event()

    def _on_commit(event: SnapshotCommittedEvent) -> None:
        if until_done and not event.snapshot.run.is_active:
            done.set()

    controller.dispatcher.subscribe(SnapshotCommittedEvent, _on_commit)

    await api.start()
    try:
        controller.start(run_id)
        await done.wait()
    finally:
        controller.stop()
        await controller.join()
        await api.close()


def watch_run(
    run_id: str,
    settings: Settings,
    *,
    svg_dir: Optional[Path] = None,
    until_done: bool = False,
    api_factory: Optional[Callable[[Settings], RunsApi]] = None,
) -> None:
    """
    Watch a run until interrupted (or until it finishes with ``until_done``).

    This is the synchronous entry point used by the CLI. It manages the
    event loop and the lifecycle of the API client and controller.

    Args:
        run_id: Identifier of the run to watch
        settings: Client settings
        svg_dir: Directory receiving chart fragments on every refresh
        until_done: Return once the run reaches a non-active status
        api_factory: Builds the API client (HttpRunsClient by default)
    """
    factory = api_factory or HttpRunsClient
    exit_code = 0

    try:
        asyncio.run(_watch(factory(settings), run_id, settings, svg_dir, until_done))

    except KeyboardInterrupt:
        log.info("Interrupted by user - shutting down gracefully")

    except Exception as e:
        log.exception("Fatal error while watching run %s: %s", run_id, e)
        exit_code = 1

    if exit_code:
        sys.exit(exit_code)
