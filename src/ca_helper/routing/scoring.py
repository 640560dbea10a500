# src/ca_helper/routing/scoring.py

from __future__ import annotations

"""
Target grouping and ranking.

Two modes:
- smart ("low-hanging fruit"): average of 0.6 * difficulty bonus + 0.4 * population
  completion rate over the easiest (up to) three incomplete tasks, highest first;
- simple: easiest remaining tier first, then target name.

Everything here is a pure function of its inputs.
"""

import logging
from collections.abc import Sequence

from ..core.models import DIFFICULTY_ORDER, Difficulty, TargetGroup, Task
from .filters import apply_filters
from .options import RoutingConfig

logger = logging.getLogger(__name__)

DIFFICULTY_BONUS: dict[Difficulty, float] = {
    Difficulty.EASY: 100.0,
    Difficulty.MEDIUM: 80.0,
    Difficulty.HARD: 60.0,
    Difficulty.ELITE: 40.0,
    Difficulty.MASTER: 20.0,
    Difficulty.GRANDMASTER: 0.0,
}

DIFFICULTY_WEIGHT = 0.6
COMPLETION_WEIGHT = 0.4
EASIEST_TASKS_CONSIDERED = 3

# Below every real score (real scores are >= 0).
COMPLETE_SCORE = -1.0

# Simple mode: groups with nothing left sort after every tier.
_NO_REMAINING_RANK = len(DIFFICULTY_ORDER)


def task_score(task: Task) -> float:
    return DIFFICULTY_WEIGHT * DIFFICULTY_BONUS[task.difficulty] + COMPLETION_WEIGHT * task.completion_rate


def easiest_first(tasks: Sequence[Task]) -> list[Task]:
    """Difficulty ascending, then population completion rate descending, then id."""
    return sorted(tasks, key=lambda t: (t.difficulty.rank, -t.completion_rate, t.id))


def low_hanging_fruit_score(incomplete: Sequence[Task]) -> float:
    if not incomplete:
        return COMPLETE_SCORE
    easiest = easiest_first(incomplete)[:EASIEST_TASKS_CONSIDERED]
    return sum(task_score(t) for t in easiest) / len(easiest)


def display_order(tasks: Sequence[Task]) -> tuple[Task, ...]:
    """Incomplete tasks alphabetically, then complete tasks alphabetically."""
    return tuple(sorted(tasks, key=lambda t: (t.is_complete, t.name.lower(), t.id)))


def group_by_target(tasks: Sequence[Task]) -> dict[str, list[Task]]:
    groups: dict[str, list[Task]] = {}
    for t in tasks:
        groups.setdefault(t.monster, []).append(t)
    return groups


def build_group(key: str, tasks: Sequence[Task]) -> TargetGroup:
    incomplete = [t for t in tasks if not t.is_complete]
    return TargetGroup(
        key=key,
        tasks=display_order(tasks),
        completed_count=len(tasks) - len(incomplete),
        total_count=len(tasks),
        score=low_hanging_fruit_score(incomplete),
    )


def easiest_remaining_rank(group: TargetGroup) -> int:
    ranks = [t.difficulty.rank for t in group.tasks if not t.is_complete]
    return min(ranks) if ranks else _NO_REMAINING_RANK


def rank_groups(groups: Sequence[TargetGroup], *, smart: bool) -> list[TargetGroup]:
    if smart:
        return sorted(groups, key=lambda g: (-g.score, g.key))
    return sorted(groups, key=lambda g: (easiest_remaining_rank(g), g.key))


def recommend(tasks: Sequence[Task], config: RoutingConfig, limit: int = 0) -> list[TargetGroup]:
    """
    Filter, group by target and rank.

    `tasks` must already be enriched and carry their completion flag.
    A non-positive `limit` means no truncation.
    """
    kept = apply_filters(tasks, config)
    if not kept:
        logger.info("No tasks found after filtering")
        return []

    groups = [build_group(key, members) for key, members in group_by_target(kept).items()]
    ranked = rank_groups(groups, smart=config.use_smart_routing)

    logger.debug(
        "Ranked %d targets from %d tasks (%s routing)",
        len(ranked),
        len(kept),
        "smart" if config.use_smart_routing else "simple",
    )
    for g in ranked[:10]:
        if g.is_complete:
            logger.debug("  %s: COMPLETE (%d/%d)", g.key, g.completed_count, g.total_count)
        else:
            logger.debug("  %s: %d/%d (score: %.1f)", g.key, g.completed_count, g.total_count, g.score)

    if 0 < limit < len(ranked):
        ranked = ranked[:limit]
    return ranked
