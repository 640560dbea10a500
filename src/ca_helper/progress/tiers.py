# src/ca_helper/progress/tiers.py

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ..core.models import DIFFICULTY_ORDER, Difficulty, Task
from ..core.ports import CompletionSource
from .decoder import total_points

logger = logging.getLogger(__name__)

NO_TIER = "None"
COMPLETE = "Complete"

# Used when the host reports a non-positive threshold or fails to report one.
FALLBACK_THRESHOLDS: dict[Difficulty, int] = {
    Difficulty.EASY: 33,
    Difficulty.MEDIUM: 143,
    Difficulty.HARD: 394,
    Difficulty.ELITE: 1038,
    Difficulty.MASTER: 1561,
    Difficulty.GRANDMASTER: 2277,
}


def resolve_thresholds(source: CompletionSource | None) -> dict[Difficulty, int]:
    """Read each tier threshold independently, falling back per tier."""
    out: dict[Difficulty, int] = {}
    for tier in DIFFICULTY_ORDER:
        fallback = FALLBACK_THRESHOLDS[tier]
        value: int | None = None
        if source is not None:
            try:
                value = source.tier_threshold(tier)
            except Exception:
                logger.warning("Failed to read threshold for %s, using fallback %s", tier, fallback)
                value = None

        if value is None or value <= 0:
            logger.debug("Threshold for %s unavailable (%r), using fallback %s", tier, value, fallback)
            out[tier] = fallback
        else:
            out[tier] = int(value)
    return out


def _threshold(thresholds: dict[Difficulty, int], tier: Difficulty) -> int:
    return thresholds.get(tier, FALLBACK_THRESHOLDS[tier])


def current_tier(points: int, thresholds: dict[Difficulty, int]) -> str:
    reached = NO_TIER
    for tier in DIFFICULTY_ORDER:
        if points >= _threshold(thresholds, tier):
            reached = tier.value
    return reached


def next_tier_name(current: str) -> str:
    if current == NO_TIER:
        return DIFFICULTY_ORDER[0].value
    tier = Difficulty.from_name(current)
    if tier is None:
        return DIFFICULTY_ORDER[0].value
    if tier.rank + 1 >= len(DIFFICULTY_ORDER):
        return COMPLETE
    return DIFFICULTY_ORDER[tier.rank + 1].value


def points_to_next_tier(points: int, thresholds: dict[Difficulty, int]) -> int:
    nxt = next_tier_name(current_tier(points, thresholds))
    if nxt == COMPLETE:
        return 0
    tier = Difficulty.from_name(nxt)
    if tier is None:
        logger.warning("Unknown next tier %r, reporting no points to go", nxt)
        return 0
    return max(0, _threshold(thresholds, tier) - points)


@dataclass(slots=True, frozen=True)
class TierProgress:
    points: int
    current_tier: str
    next_tier: str
    points_to_next: int
    completed_count: int
    total_count: int


def build_tier_progress(tasks: Sequence[Task], thresholds: dict[Difficulty, int]) -> TierProgress:
    points = total_points(tasks)
    tier = current_tier(points, thresholds)
    return TierProgress(
        points=points,
        current_tier=tier,
        next_tier=next_tier_name(tier),
        points_to_next=points_to_next_tier(points, thresholds),
        completed_count=sum(1 for t in tasks if t.is_complete),
        total_count=len(tasks),
    )
