"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from caffeine_tracker.api.models import IntakeRequest, SetupRequest
from caffeine_tracker.app_logging import configure_logging
from caffeine_tracker.containers import AppContainer
from caffeine_tracker.domain.intake import (
    SHOT_MG,
    SHOT_PRESETS,
    DashboardSnapshot,
    IntakeEntry,
    SamplePoint,
)
from caffeine_tracker.services.intake_log import now_millis
from caffeine_tracker.services.tracker import InvalidIntakeError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    tz = ZoneInfo(container.settings.display_timezone)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        refresher = app.state.container.refresher
        refresher.start()
        yield
        await refresher.stop()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(InvalidIntakeError)
    async def invalid_intake_handler(
        request: Request, exc: InvalidIntakeError
    ) -> JSONResponse:
        logger.info("Rejected intake request: %s", exc)
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/level")
    async def level(request: Request) -> dict[str, object]:
        """Return the live caffeine level."""
        state_container: AppContainer = request.app.state.container
        now = now_millis()
        return {
            "now": now,
            "level_mg": state_container.tracker_service.current_level(now),
        }

    @app.get("/series")
    async def series(request: Request) -> dict[str, object]:
        """Return the chart series around the current time."""
        state_container: AppContainer = request.app.state.container
        points = state_container.series_service.series()
        return {"points": [_point_payload(point) for point in points]}

    @app.get("/history")
    async def history(request: Request) -> dict[str, object]:
        """Return logged intakes, most recent first."""
        state_container: AppContainer = request.app.state.container
        now = now_millis()
        entries = state_container.intake_log.history()
        return {"entries": [_entry_payload(entry, now, tz) for entry in entries]}

    @app.get("/dashboard")
    async def dashboard(request: Request) -> dict[str, object]:
        """Return the most recently published dashboard snapshot."""
        state_container: AppContainer = request.app.state.container
        return _snapshot_payload(state_container.refresher.current(), tz)

    @app.post("/intakes")
    async def add_intake(payload: IntakeRequest, request: Request) -> dict[str, object]:
        """Log an immediate or backdated intake."""
        state_container: AppContainer = request.app.state.container
        tracker = state_container.tracker_service
        amount = _resolve_amount(payload)
        now = now_millis()
        if payload.timestamp is None:
            entry = tracker.add_now(amount, now=now)
        else:
            entry = tracker.add_past(amount, payload.timestamp, now=now)
        snapshot = state_container.refresher.refresh(now)
        return {
            "entry": _entry_payload(entry, now, tz),
            "level_mg": snapshot.level,
        }

    @app.delete("/intakes/{timestamp}")
    async def delete_intake(timestamp: int, request: Request) -> dict[str, object]:
        """Delete every intake logged at the timestamp."""
        state_container: AppContainer = request.app.state.container
        state_container.tracker_service.delete(timestamp)
        snapshot = state_container.refresher.refresh()
        return {"status": "ok", "level_mg": snapshot.level}

    @app.get("/setup")
    async def setup_status(request: Request) -> dict[str, bool]:
        """Return whether initial setup has been completed."""
        state_container: AppContainer = request.app.state.container
        return {"complete": state_container.tracker_service.is_setup_complete()}

    @app.post("/setup")
    async def complete_setup(
        payload: SetupRequest, request: Request
    ) -> dict[str, object]:
        """Record the starting intake and finish setup."""
        state_container: AppContainer = request.app.state.container
        now = now_millis()
        state_container.tracker_service.complete_setup(payload.initial_amount, now=now)
        snapshot = state_container.refresher.refresh(now)
        return {"complete": True, "level_mg": snapshot.level}

    @app.post("/reset")
    async def reset(request: Request) -> dict[str, str]:
        """Delete all intakes and the setup flag."""
        state_container: AppContainer = request.app.state.container
        state_container.tracker_service.reset()
        state_container.refresher.refresh()
        logger.info("Intake log reset")
        return {"status": "ok"}

    return app


def _resolve_amount(payload: IntakeRequest) -> float | None:
    if payload.shots is not None and payload.amount is not None:
        raise InvalidIntakeError("Send either an amount or a shot count, not both.")
    if payload.shots is not None:
        if payload.shots not in SHOT_PRESETS:
            raise InvalidIntakeError(f"Unsupported shot count: {payload.shots}")
        return float(payload.shots * SHOT_MG)
    return payload.amount


def format_timestamp(timestamp: int, now: int, tz: ZoneInfo) -> str:
    """Format an intake time relative to today in the display timezone.

    Times outside the range datetime can represent fall back to the raw value.
    """
    try:
        moment = datetime.fromtimestamp(timestamp / 1000, tz=UTC).astimezone(tz)
        today = datetime.fromtimestamp(now / 1000, tz=UTC).astimezone(tz).date()
    except (OverflowError, OSError, ValueError):
        return str(timestamp)
    clock = moment.strftime("%H:%M")
    if moment.date() == today:
        return f"Today {clock}"
    if moment.date() == today - timedelta(days=1):
        return f"Yesterday {clock}"
    return f"{moment.date().isoformat()} {clock}"


def _entry_payload(entry: IntakeEntry, now: int, tz: ZoneInfo) -> dict[str, object]:
    return {
        "timestamp": entry.timestamp,
        "amount": entry.amount,
        "label": format_timestamp(entry.timestamp, now, tz),
    }


def _point_payload(point: SamplePoint) -> dict[str, object]:
    return {
        "offset_hours": point.offset_hours,
        "label": point.label,
        "time": point.time,
        "value": point.value,
    }


def _snapshot_payload(snapshot: DashboardSnapshot, tz: ZoneInfo) -> dict[str, object]:
    return {
        "now": snapshot.now,
        "level_mg": snapshot.level,
        "series": [_point_payload(point) for point in snapshot.series],
        "history": [
            _entry_payload(entry, snapshot.now, tz) for entry in snapshot.history
        ],
    }
