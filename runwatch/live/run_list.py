import asyncio
import logging
from collections.abc import Callable
from typing import Optional

from runwatch.api.base import RunsApi, RunwatchError
from runwatch.api.models import RunRecord
from runwatch.config import Settings

log = logging.getLogger(__name__)


def count_active(runs: list[RunRecord]) -> int:
    """Number of runs still queued or running."""
    return sum(1 for r in runs if r.is_active)


class RunListPoller:
    """
    Keeps the run list fresh on a fixed cadence.

    A failed refresh keeps the previous list and records the error message,
    mirroring :class:`LiveRefreshController`.
    """

    def __init__(self, api: RunsApi, *, settings: Optional[Settings] = None):
        self._api = api
        self._settings = settings or Settings()
        self.runs: list[RunRecord] = []
        self.last_error: Optional[str] = None
        self.loaded = False

    @property
    def active_count(self) -> int:
        return count_active(self.runs)

    async def refresh(self) -> bool:
        try:
            runs = await self._api.list_runs()
        except RunwatchError as exc:
            self.last_error = str(exc)
            log.warning("Run list refresh failed: %s", exc)
            return False
        finally:
            self.loaded = True

        self.runs = runs
        self.last_error = None
        return True

    async def run(
        self,
        iterations: Optional[int] = None,
        on_refresh: Optional[Callable[["RunListPoller"], None]] = None,
    ) -> None:
        """
        Refresh forever (or *iterations* times), sleeping between refreshes.

        *on_refresh* is called with the poller after every attempt, failed or not.
        """
        n = 0
        while iterations is None or n < iterations:
            await self.refresh()
            if on_refresh is not None:
                on_refresh(self)
            n += 1
            if iterations is not None and n >= iterations:
                break
            await asyncio.sleep(self._settings.run_list_poll_s)
