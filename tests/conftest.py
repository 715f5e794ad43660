"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from caffeine_tracker.config import Settings
from caffeine_tracker.containers import AppContainer, build_container
from caffeine_tracker.domain.intake import HOUR_MS
from caffeine_tracker.services.intake_log import IntakeLogService, KeyValueStore
from caffeine_tracker.services.tracker import TrackerService

NOW = 1_760_000_000_000
HOUR = HOUR_MS


@dataclass
class RecordingStore(KeyValueStore):
    """In-memory store that records every write."""

    values: dict[str, str] = field(default_factory=dict)
    writes: list[tuple[str, str]] = field(default_factory=list)
    deletes: list[str] = field(default_factory=list)

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.writes.append((key, value))
        self.values[key] = value

    def delete(self, key: str) -> None:
        self.deletes.append(key)
        self.values.pop(key, None)


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def intake_log(store: RecordingStore) -> IntakeLogService:
    return IntakeLogService(store)


@pytest.fixture
def tracker(store: RecordingStore, intake_log: IntakeLogService) -> TrackerService:
    return TrackerService(intake_log=intake_log, store=store)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url=None,
        supabase_service_key=None,
        display_timezone="UTC",
    )


@pytest.fixture
def container(settings: Settings, store: RecordingStore) -> AppContainer:
    return build_container(settings, store=store)
