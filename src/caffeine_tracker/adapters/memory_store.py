"""In-memory key-value store."""

from dataclasses import dataclass

from caffeine_tracker.services.intake_log import KeyValueStore


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store for local runs."""

    _values: dict[str, str]

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self._values = dict(values or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)
