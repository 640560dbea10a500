# src/ca_helper/catalog/store.py

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, replace

from ..core.models import DIFFICULTY_ORDER, CatalogRecord, Difficulty, Task, TaskCategory
from ..core.ports import CatalogSource
from ..progress.decoder import is_task_complete
from .names import extract_monster_name

logger = logging.getLogger(__name__)

# Host structs carry no task kind; the wiki supplies the real one on match.
DEFAULT_CATEGORY = TaskCategory.MECHANICAL


@dataclass(slots=True, frozen=True)
class CatalogStore:
    """
    Authoritative task catalog read from the host.

    Built wholesale by load_catalog() and never mutated. Tasks are stored with
    is_complete=False; evaluate() attaches the decoded flag for one pass.
    """

    tasks: tuple[Task, ...] = ()

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self.tasks)

    @property
    def is_empty(self) -> bool:
        return not self.tasks

    def get(self, task_id: int) -> Task | None:
        for t in self.tasks:
            if t.id == task_id:
                return t
        return None

    def find(self, name_part: str) -> list[Task]:
        needle = name_part.strip().lower()
        if not needle:
            return []
        return [t for t in self.tasks if needle in t.name.lower()]

    def evaluate(self, completion_words: Sequence[int]) -> list[Task]:
        """Attach the decoded completion flag to every task (pure)."""
        return [replace(t, is_complete=is_task_complete(completion_words, t.id)) for t in self.tasks]


def _record_to_task(record: CatalogRecord, difficulty: Difficulty) -> Task:
    name = (record.name or "").strip()
    return Task(
        id=int(record.task_id),
        name=name,
        difficulty=difficulty,
        monster=extract_monster_name(name),
        category=DEFAULT_CATEGORY,
        description=(record.description or "").strip(),
    )


def load_catalog(source: CatalogSource) -> CatalogStore:
    """
    Read every tier's records from the host.

    A missing or broken record is skipped (logged) so one bad struct never
    prevents the rest of the catalog from loading. Duplicate task ids keep the
    first occurrence.
    """
    tasks: list[Task] = []
    seen: set[int] = set()

    for difficulty in DIFFICULTY_ORDER:
        try:
            record_ids = list(source.tier_record_ids(difficulty))
        except Exception:
            logger.exception("Failed to read record ids for tier %s", difficulty)
            continue

        logger.info("Loading %d tasks for tier %s", len(record_ids), difficulty)

        for record_id in record_ids:
            try:
                record = source.record(record_id)
            except Exception as e:
                logger.warning("Failed to load record %s: %s", record_id, e)
                continue

            if record is None:
                logger.warning("Record %s is null", record_id)
                continue

            if not (record.name or "").strip():
                logger.warning("Record %s has no name; skipped", record_id)
                continue

            try:
                task = _record_to_task(record, difficulty)
            except (TypeError, ValueError) as e:
                logger.warning("Record %s is malformed: %s", record_id, e)
                continue

            if task.id in seen:
                logger.warning("Duplicate task id %s (record %s); keeping first", task.id, record_id)
                continue

            seen.add(task.id)
            tasks.append(task)

    logger.info("Loaded %d combat achievement tasks", len(tasks))
    return CatalogStore(tasks=tuple(tasks))
