"""Tests for the caffeine decay model."""

import pytest

from caffeine_tracker.domain.intake import HALF_LIFE_MS, IntakeEntry
from caffeine_tracker.services.decay import level_at
from tests.conftest import HOUR, NOW


def test_entry_contributes_full_amount_at_its_timestamp() -> None:
    entries = [IntakeEntry(timestamp=NOW, amount=75)]

    assert level_at(entries, NOW) == 75


def test_single_shot_halves_every_five_hours() -> None:
    entries = [IntakeEntry(timestamp=NOW, amount=75)]

    assert level_at(entries, NOW + HALF_LIFE_MS) == pytest.approx(37.5)
    assert level_at(entries, NOW + 5 * HOUR) == pytest.approx(37.5)
    assert level_at(entries, NOW + 10 * HOUR) == pytest.approx(18.75)


def test_decay_is_continuous_between_half_lives() -> None:
    entries = [IntakeEntry(timestamp=NOW, amount=100)]

    level = level_at(entries, NOW + HALF_LIFE_MS // 2)

    assert level == pytest.approx(100 * 0.5**0.5)


def test_future_entries_do_not_contribute() -> None:
    entries = [
        IntakeEntry(timestamp=NOW - HOUR, amount=100),
        IntakeEntry(timestamp=NOW + 1, amount=300),
    ]

    assert level_at(entries, NOW) == pytest.approx(100 * 0.5 ** (1 / 5))
    assert level_at(entries, NOW - 2 * HOUR) == 0.0


def test_entries_sharing_a_timestamp_both_count() -> None:
    entries = [
        IntakeEntry(timestamp=NOW, amount=75),
        IntakeEntry(timestamp=NOW, amount=75),
    ]

    assert level_at(entries, NOW) == 150
    assert level_at(entries, NOW + 5 * HOUR) == pytest.approx(75)


def test_empty_log_is_zero() -> None:
    assert level_at([], NOW) == 0.0


def test_level_is_non_negative_and_non_increasing_after_last_intake() -> None:
    entries = [
        IntakeEntry(timestamp=NOW - 6 * HOUR, amount=150),
        IntakeEntry(timestamp=NOW - 2 * HOUR, amount=75),
        IntakeEntry(timestamp=NOW, amount=0),
    ]

    levels = [level_at(entries, NOW + step * HOUR // 2) for step in range(0, 60)]

    assert all(level >= 0 for level in levels)
    assert all(later <= earlier for earlier, later in zip(levels, levels[1:]))
