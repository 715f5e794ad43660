"""Tests for the dashboard refresher."""

import asyncio
from dataclasses import dataclass, field

from caffeine_tracker.domain.intake import DashboardSnapshot
from caffeine_tracker.services.refresh import DashboardRefresher
from caffeine_tracker.services.tracker import TrackerService
from tests.conftest import NOW


@dataclass
class FlakyTracker:
    """Tracker stub whose first snapshot fails."""

    calls: list[int | None] = field(default_factory=list)

    def snapshot(self, now: int | None = None) -> DashboardSnapshot:
        self.calls.append(now)
        if len(self.calls) == 1:
            raise RuntimeError("store unavailable")
        return DashboardSnapshot(now=NOW, level=0.0, series=[], history=[])


def test_current_computes_snapshot_on_first_use(tracker: TrackerService) -> None:
    tracker.add_now(75, now=NOW)
    refresher = DashboardRefresher(tracker)

    snapshot = refresher.current()

    assert refresher.snapshot is snapshot
    assert len(snapshot.history) == 1


def test_refresh_republishes_store_state(tracker: TrackerService) -> None:
    refresher = DashboardRefresher(tracker)
    first = refresher.refresh(NOW)

    tracker.add_now(150, now=NOW)
    second = refresher.refresh(NOW)

    assert first.level == 0.0
    assert second.level == 150
    assert refresher.current() is second


def test_run_loop_refreshes_until_stopped(tracker: TrackerService) -> None:
    refresher = DashboardRefresher(tracker, interval_seconds=0.01)

    async def scenario() -> None:
        refresher.start()
        await asyncio.sleep(0.05)
        assert refresher.running
        await refresher.stop()
        await refresher.stop()

    asyncio.run(scenario())

    assert refresher.snapshot is not None
    assert not refresher.running


def test_run_loop_survives_failed_refresh() -> None:
    flaky = FlakyTracker()
    refresher = DashboardRefresher(flaky, interval_seconds=0.01)

    async def scenario() -> None:
        refresher.start()
        await asyncio.sleep(0.05)
        await refresher.stop()

    asyncio.run(scenario())

    assert len(flaky.calls) >= 2
    assert refresher.snapshot is not None
