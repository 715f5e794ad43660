"""Periodic dashboard refresh."""

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field

from caffeine_tracker.domain.intake import REFRESH_INTERVAL_SECONDS, DashboardSnapshot
from caffeine_tracker.services.tracker import TrackerService

logger = logging.getLogger(__name__)


@dataclass
class DashboardRefresher:
    """Holds the latest dashboard snapshot and republishes it on a timer."""

    tracker: TrackerService
    interval_seconds: float = REFRESH_INTERVAL_SECONDS
    snapshot: DashboardSnapshot | None = None
    _task: asyncio.Task[None] | None = field(default=None, repr=False)

    def refresh(self, now: int | None = None) -> DashboardSnapshot:
        """Recompute the snapshot from the store."""
        self.snapshot = self.tracker.snapshot(now)
        return self.snapshot

    def current(self) -> DashboardSnapshot:
        """Return the latest snapshot, computing one if none was published."""
        if self.snapshot is None:
            return self.refresh()
        return self.snapshot

    async def run(self) -> None:
        """Refresh every interval until cancelled."""
        while True:
            try:
                self.refresh()
            except Exception:
                logger.exception("Dashboard refresh failed")
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> None:
        """Start the refresh loop on the running event loop."""
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self.run())

    async def stop(self) -> None:
        """Cancel the refresh loop; safe to call more than once."""
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
