"""Domain models for caffeine intake tracking."""

from dataclasses import dataclass

HOUR_MS = 60 * 60 * 1000

HALF_LIFE_MS = 5 * HOUR_MS
RETENTION_MS = 24 * HOUR_MS

SAMPLE_STEP_MS = 30 * 60 * 1000
SAMPLE_SPAN_STEPS = 24

REFRESH_INTERVAL_SECONDS = 60

LOG_KEY = "caffeineLog"
SETUP_KEY = "caffInMe_setupComplete"

SHOT_MG = 75
SHOT_PRESETS = (1, 2, 4)


@dataclass(frozen=True)
class IntakeEntry:
    """One logged caffeine intake."""

    timestamp: int
    amount: float


@dataclass(frozen=True)
class SamplePoint:
    """A single point of the caffeine level curve."""

    offset_hours: float
    label: str
    time: int
    value: float


@dataclass(frozen=True)
class DashboardSnapshot:
    """Everything a view needs for one refresh."""

    now: int
    level: float
    series: list[SamplePoint]
    history: list[IntakeEntry]
