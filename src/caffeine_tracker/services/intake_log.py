"""Persisted intake log with lazy retention pruning."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from caffeine_tracker.domain.intake import LOG_KEY, RETENTION_MS, IntakeEntry

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Durable string store shared by every reader and writer.

    Writes overwrite whatever is stored; the last writer wins.
    """

    def get(self, key: str) -> str | None:
        """Return the stored value, if present."""

    def set(self, key: str, value: str) -> None:
        """Store a value under the key."""

    def delete(self, key: str) -> None:
        """Remove the key if present."""


class StoredIntake(BaseModel):
    """Serialized form of an intake entry."""

    model_config = ConfigDict(strict=True)

    timestamp: int
    amount: float = Field(ge=0, allow_inf_nan=False)


_LOG_ADAPTER = TypeAdapter(list[StoredIntake])


def now_millis() -> int:
    """Return the current time in epoch milliseconds."""
    return int(datetime.now(tz=UTC).timestamp() * 1000)


@dataclass
class IntakeLogService:
    """Owns the intake log stored under a single key."""

    store: KeyValueStore
    key: str = LOG_KEY

    def load(self) -> list[IntakeEntry]:
        """Return the stored entries sorted by timestamp, or [] if unreadable."""
        raw = self.store.get(self.key)
        if not raw:
            return []
        try:
            records = _LOG_ADAPTER.validate_json(raw)
        except ValidationError:
            logger.warning("Discarding malformed intake log", extra={"key": self.key})
            return []
        entries = [
            IntakeEntry(timestamp=record.timestamp, amount=record.amount)
            for record in records
        ]
        return sorted(entries, key=lambda entry: entry.timestamp)

    def append(self, entry: IntakeEntry, now: int | None = None) -> list[IntakeEntry]:
        """Add an entry, drop entries older than the retention window, persist."""
        resolved_now = now if now is not None else now_millis()
        cutoff = resolved_now - RETENTION_MS
        entries = [*self.load(), entry]
        kept = [item for item in entries if item.timestamp > cutoff]
        pruned = len(entries) - len(kept)
        if pruned:
            logger.info("Pruned expired intake entries", extra={"count": pruned})
        return self._save(kept)

    def remove(self, timestamp: int) -> list[IntakeEntry]:
        """Remove every entry logged at exactly ``timestamp`` and persist."""
        kept = [entry for entry in self.load() if entry.timestamp != timestamp]
        return self._save(kept)

    def history(self) -> list[IntakeEntry]:
        """Return entries most recent first."""
        return list(reversed(self.load()))

    def clear(self) -> None:
        """Delete the stored log."""
        self.store.delete(self.key)

    def _save(self, entries: list[IntakeEntry]) -> list[IntakeEntry]:
        ordered = sorted(entries, key=lambda entry: entry.timestamp)
        payload = _LOG_ADAPTER.dump_json(
            [
                StoredIntake(timestamp=entry.timestamp, amount=entry.amount)
                for entry in ordered
            ]
        )
        self.store.set(self.key, payload.decode())
        return ordered
