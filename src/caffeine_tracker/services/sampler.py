"""Sampling of the caffeine level curve around the current time."""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from caffeine_tracker.domain.intake import (
    HOUR_MS,
    SAMPLE_SPAN_STEPS,
    SAMPLE_STEP_MS,
    IntakeEntry,
    SamplePoint,
)
from caffeine_tracker.services.decay import level_at
from caffeine_tracker.services.intake_log import IntakeLogService, now_millis


@dataclass(frozen=True)
class TimeSeries:
    """Window of levels from -12h to +12h around ``now`` at 30 minute steps.

    Values are computed on iteration, so iterating twice recomputes them.
    """

    entries: Sequence[IntakeEntry]
    now: int

    def __iter__(self) -> Iterator[SamplePoint]:
        for step in range(-SAMPLE_SPAN_STEPS, SAMPLE_SPAN_STEPS + 1):
            time = self.now + step * SAMPLE_STEP_MS
            offset_hours = step * SAMPLE_STEP_MS / HOUR_MS
            yield SamplePoint(
                offset_hours=offset_hours,
                label=offset_label(offset_hours),
                time=time,
                value=level_at(self.entries, time),
            )

    def __len__(self) -> int:
        return 2 * SAMPLE_SPAN_STEPS + 1

    def labels(self) -> list[str]:
        return [point.label for point in self]

    def values(self) -> list[float]:
        return [point.value for point in self]


def sample(entries: Sequence[IntakeEntry], now: int) -> TimeSeries:
    """Return the chart window for ``entries`` centred on ``now``."""
    return TimeSeries(entries=tuple(entries), now=now)


def offset_label(offset_hours: float) -> str:
    """Label a sample by its signed hour offset, "Now" at zero."""
    if offset_hours == 0:
        return "Now"
    return f"{offset_hours:+g}h"


@dataclass
class SeriesService:
    """Samples the live intake log."""

    intake_log: IntakeLogService

    def series(self, now: int | None = None) -> list[SamplePoint]:
        """Return the current chart series from the stored log."""
        resolved_now = now if now is not None else now_millis()
        return list(sample(self.intake_log.load(), resolved_now))
