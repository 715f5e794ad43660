"""First-order elimination model for residual caffeine."""

from collections.abc import Iterable

from caffeine_tracker.domain.intake import HALF_LIFE_MS, IntakeEntry


def level_at(
    entries: Iterable[IntakeEntry],
    query_time: int,
    half_life_ms: int = HALF_LIFE_MS,
) -> float:
    """Return the residual caffeine in mg at ``query_time``.

    Each entry decays independently as ``amount * 0.5 ** (elapsed / half_life)``.
    Entries logged after ``query_time`` contribute nothing.
    """
    total = 0.0
    for entry in entries:
        elapsed = query_time - entry.timestamp
        if elapsed < 0:
            continue
        total += entry.amount * 0.5 ** (elapsed / half_life_ms)
    return total
