# tests/test_tiers.py

from __future__ import annotations

from ca_helper.core.models import Difficulty
from ca_helper.progress.tiers import (
    COMPLETE,
    FALLBACK_THRESHOLDS,
    NO_TIER,
    build_tier_progress,
    current_tier,
    next_tier_name,
    points_to_next_tier,
    resolve_thresholds,
)

from .fakes import FakeCompletionSource, make_task


def test_thresholds_fall_back_per_tier() -> None:
    source = FakeCompletionSource(
        thresholds={
            Difficulty.EASY: 0,
            Difficulty.MEDIUM: RuntimeError("boom"),
            Difficulty.HARD: None,
            Difficulty.ELITE: 1000,
            Difficulty.MASTER: -5,
            Difficulty.GRANDMASTER: 2500,
        }
    )
    t = resolve_thresholds(source)
    assert t[Difficulty.EASY] == 33
    assert t[Difficulty.MEDIUM] == 143
    assert t[Difficulty.HARD] == 394
    assert t[Difficulty.ELITE] == 1000
    assert t[Difficulty.MASTER] == 1561
    assert t[Difficulty.GRANDMASTER] == 2500


def test_no_source_uses_all_fallbacks() -> None:
    assert resolve_thresholds(None) == FALLBACK_THRESHOLDS


def test_tier_boundaries() -> None:
    t = FALLBACK_THRESHOLDS
    assert current_tier(0, t) == NO_TIER
    assert current_tier(32, t) == NO_TIER
    assert current_tier(33, t) == "Easy"
    assert current_tier(150, t) == "Medium"
    assert current_tier(2277, t) == "Grandmaster"


def test_next_tier_and_points_needed() -> None:
    t = FALLBACK_THRESHOLDS
    assert next_tier_name(NO_TIER) == "Easy"
    assert next_tier_name("Medium") == "Hard"
    assert next_tier_name("Grandmaster") == COMPLETE

    assert points_to_next_tier(0, t) == 33
    assert points_to_next_tier(150, t) == 394 - 150
    assert points_to_next_tier(5000, t) == 0


def test_build_tier_progress() -> None:
    tasks = [make_task(i, f"t{i}", Difficulty.ELITE, is_complete=True) for i in range(9)]
    tasks.append(make_task(99, "left", Difficulty.EASY))

    progress = build_tier_progress(tasks, FALLBACK_THRESHOLDS)
    assert progress.points == 36
    assert progress.current_tier == "Easy"
    assert progress.next_tier == "Medium"
    assert progress.points_to_next == 143 - 36
    assert progress.completed_count == 9
    assert progress.total_count == 10


def test_points_needed_with_missing_thresholds_uses_fallbacks() -> None:
    partial = {Difficulty.EASY: 10}
    assert current_tier(12, partial) == "Easy"
    assert points_to_next_tier(12, partial) == 143 - 12
    assert points_to_next_tier(0, {}) == 33


def test_points_needed_for_unknown_next_tier_is_zero(monkeypatch) -> None:
    import ca_helper.progress.tiers as tiers

    monkeypatch.setattr(tiers, "next_tier_name", lambda current: "Legendary")
    assert tiers.points_to_next_tier(0, FALLBACK_THRESHOLDS) == 0
