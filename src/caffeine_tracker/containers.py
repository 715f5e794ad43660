"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from caffeine_tracker.adapters.memory_store import InMemoryKeyValueStore
from caffeine_tracker.adapters.supabase_store import SupabaseKeyValueStore
from caffeine_tracker.config import Settings
from caffeine_tracker.services.intake_log import IntakeLogService, KeyValueStore
from caffeine_tracker.services.refresh import DashboardRefresher
from caffeine_tracker.services.sampler import SeriesService
from caffeine_tracker.services.tracker import TrackerService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: KeyValueStore
    intake_log: IntakeLogService
    series_service: SeriesService
    tracker_service: TrackerService
    refresher: DashboardRefresher


def build_store(settings: Settings) -> KeyValueStore:
    """Return the configured key-value store."""
    if settings.uses_supabase:
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseKeyValueStore(client, table=settings.supabase_table)
    return InMemoryKeyValueStore()


def build_container(
    settings: Settings | None = None, store: KeyValueStore | None = None
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    resolved_store = store if store is not None else build_store(resolved_settings)
    intake_log = IntakeLogService(resolved_store)
    tracker_service = TrackerService(intake_log=intake_log, store=resolved_store)
    refresher = DashboardRefresher(
        tracker=tracker_service,
        interval_seconds=resolved_settings.refresh_interval_seconds,
    )
    return AppContainer(
        settings=resolved_settings,
        store=resolved_store,
        intake_log=intake_log,
        series_service=SeriesService(intake_log),
        tracker_service=tracker_service,
        refresher=refresher,
    )
