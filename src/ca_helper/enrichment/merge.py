# src/ca_helper/enrichment/merge.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace

from ..catalog.names import extract_monster_name
from ..core.models import RemoteTask, Task
from .index import EnrichmentIndex

logger = logging.getLogger(__name__)


def _merge(task: Task, remote: RemoteTask | None) -> Task:
    if remote is None:
        return replace(task, monster=extract_monster_name(task.name))

    return replace(
        task,
        name=remote.name,
        monster=remote.monster,
        category=remote.category,
        description=remote.description,
        completion_rate=remote.completion_rate,
    )


def enrich_task(task: Task, index: EnrichmentIndex | None) -> Task:
    """
    Merge one host task with its wiki row, if any.

    Host fields win for identity and progress (id, difficulty, prerequisites,
    is_complete); the wiki supplies name, monster, category, description and the
    population completion rate.
    """
    return _merge(task, index.lookup(task.name) if index is not None else None)


def enrich(tasks: Iterable[Task], index: EnrichmentIndex | None) -> list[Task]:
    """Every input task appears exactly once in the output, matched or not."""
    out: list[Task] = []
    matched = 0
    for t in tasks:
        remote = index.lookup(t.name) if index is not None else None
        if remote is not None:
            matched += 1
        out.append(_merge(t, remote))
    logger.debug("Enriched %d/%d tasks from wiki index", matched, len(out))
    return out
