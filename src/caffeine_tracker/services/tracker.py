"""Application service for intake actions and the setup flow."""

import math
from dataclasses import dataclass

from caffeine_tracker.domain.intake import (
    SETUP_KEY,
    SHOT_MG,
    SHOT_PRESETS,
    DashboardSnapshot,
    IntakeEntry,
)
from caffeine_tracker.services.decay import level_at
from caffeine_tracker.services.intake_log import (
    IntakeLogService,
    KeyValueStore,
    now_millis,
)
from caffeine_tracker.services.sampler import sample


class InvalidIntakeError(ValueError):
    """Raised when an intake request is rejected before any mutation."""


@dataclass
class TrackerService:
    """Validates intake requests and derives the readouts views show."""

    intake_log: IntakeLogService
    store: KeyValueStore
    setup_key: str = SETUP_KEY

    def add_now(self, amount: float, now: int | None = None) -> IntakeEntry:
        """Log an intake at the current time."""
        _validate_amount(amount)
        resolved_now = _resolve_now(now)
        entry = IntakeEntry(timestamp=resolved_now, amount=float(amount))
        self.intake_log.append(entry, now=resolved_now)
        return entry

    def add_shots(self, count: int, now: int | None = None) -> IntakeEntry:
        """Log one of the espresso shot presets."""
        if count not in SHOT_PRESETS:
            raise InvalidIntakeError(f"Unsupported shot count: {count}")
        return self.add_now(count * SHOT_MG, now=now)

    def add_past(
        self, amount: float | None, timestamp: int | None, now: int | None = None
    ) -> IntakeEntry:
        """Log a backdated intake.

        Entries older than the retention window are accepted but pruned by the
        same append.
        """
        _validate_amount(amount)
        if timestamp is None:
            raise InvalidIntakeError("Intake time is required.")
        resolved_now = _resolve_now(now)
        if timestamp > resolved_now:
            raise InvalidIntakeError("Intake time cannot be in the future.")
        entry = IntakeEntry(timestamp=timestamp, amount=float(amount))
        self.intake_log.append(entry, now=resolved_now)
        return entry

    def delete(self, timestamp: int) -> None:
        """Delete all entries logged at ``timestamp``."""
        self.intake_log.remove(timestamp)

    def current_level(self, now: int | None = None) -> float:
        """Return the live caffeine level in mg."""
        return level_at(self.intake_log.load(), _resolve_now(now))

    def snapshot(self, now: int | None = None) -> DashboardSnapshot:
        """Return level, chart series and history from a single read of the log."""
        resolved_now = _resolve_now(now)
        entries = self.intake_log.load()
        return DashboardSnapshot(
            now=resolved_now,
            level=level_at(entries, resolved_now),
            series=list(sample(entries, resolved_now)),
            history=list(reversed(entries)),
        )

    def is_setup_complete(self) -> bool:
        return self.store.get(self.setup_key) == "true"

    def complete_setup(self, initial_amount: float, now: int | None = None) -> None:
        """Record the starting intake, if any, and mark setup as done."""
        if initial_amount < 0 or not math.isfinite(initial_amount):
            raise InvalidIntakeError("Initial amount must be zero or positive.")
        if initial_amount > 0:
            self.add_now(initial_amount, now=now)
        self.store.set(self.setup_key, "true")

    def reset(self) -> None:
        """Forget every intake and return to the setup screen."""
        self.intake_log.clear()
        self.store.delete(self.setup_key)


def _validate_amount(amount: float | None) -> None:
    if amount is None or not math.isfinite(amount) or amount <= 0:
        raise InvalidIntakeError("Select an intake amount.")


def _resolve_now(now: int | None) -> int:
    return now if now is not None else now_millis()
