# src/ca_helper/routing/filters.py

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..core.models import Difficulty, Task, TaskCategory
from .options import RoutingConfig

logger = logging.getLogger(__name__)

GROUP_NAME_PATTERNS: tuple[str, ...] = (
    "duo", "trio", "4-scale", "5-scale", "6-scale", "7-scale", "8-scale",
    "4-man", "5-man", "4man", "5man", "team of", "group of", "party of",
)

GROUP_DESCRIPTION_PATTERNS: tuple[str, ...] = (
    "in a group of", "in a team of", "in a party of", "with a team of",
    "with a group of", "with a party of", "as a team", "as a group",
    "in a duo", "in a trio", "with at least 2", "with at least 3",
    "with at least 4", "with at least 5", "with 2 or more",
    "with 3 or more", "with 4 or more", "with 5 or more",
    "alongside", "other players",
)

WILDERNESS_INDICATORS: tuple[str, ...] = (
    "wilderness", "wildy", "callisto", "venenatis", "vet'ion", "vetion",
    "artio", "spindel", "calvar'ion", "calvarion", "scorpia",
    "chaos elemental", "crazy archaeologist", "chaos fanatic",
    "king black dragon", "kbd", "revenant", "lava dragon",
)


def in_difficulty_band(task: Task, lo: Difficulty, hi: Difficulty) -> bool:
    return lo.rank <= task.difficulty.rank <= hi.rank


def is_group_content(task: Task) -> bool:
    if task.category == TaskCategory.GROUP_SIZE:
        return True

    name = task.name.lower()
    description = (task.description or "").lower()

    # An explicit "solo" beats any group phrase.
    if "solo" in name or "solo" in description:
        return False

    if any(p in name for p in GROUP_NAME_PATTERNS):
        return True
    return any(p in description for p in GROUP_DESCRIPTION_PATTERNS)


def is_wilderness_content(task: Task) -> bool:
    name = task.name.lower()
    monster = (task.monster or "").lower()
    description = (task.description or "").lower()
    return any(i in name or i in monster or i in description for i in WILDERNESS_INDICATORS)


def apply_filters(tasks: Sequence[Task], config: RoutingConfig) -> list[Task]:
    """
    Difficulty band, then solo-only, then wilderness.

    Each step is an independent per-task predicate, so the surviving set does
    not depend on the order.
    """
    lo, hi = config.min_difficulty, config.max_difficulty
    kept = [t for t in tasks if in_difficulty_band(t, lo, hi)]
    logger.debug("After difficulty filtering (%s..%s): %d tasks", lo, hi, len(kept))

    if config.solo_content_only:
        before = len(kept)
        kept = [t for t in kept if not is_group_content(t)]
        logger.debug("Filtered %d group tasks, %d solo remaining", before - len(kept), len(kept))

    if config.hide_wilderness_content:
        before = len(kept)
        kept = [t for t in kept if not is_wilderness_content(t)]
        logger.debug("Filtered %d wilderness tasks, %d safe remaining", before - len(kept), len(kept))

    return kept
