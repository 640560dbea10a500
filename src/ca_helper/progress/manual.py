# src/ca_helper/progress/manual.py

from __future__ import annotations

import logging

from ..core.models import TargetGroup, Task
from ..core.ports import KeyValueStore

logger = logging.getLogger(__name__)

MANUAL_COMPLETIONS_KEY = "manual_completions"


class ManualCompletions:
    """
    Task ids the player marked as done by hand.

    Stored as a comma-separated list in the preference store. This is a
    display-level override only: decoded completion and scoring ignore it.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        self._ids: set[int] = set()
        self._load()

    def _load(self) -> None:
        saved = self._store.get(MANUAL_COMPLETIONS_KEY) or ""
        ids: set[int] = set()
        for part in saved.split(","):
            part = part.strip()
            if not part:
                continue
            try:
                ids.add(int(part))
            except ValueError:
                logger.warning("Ignoring malformed manual completion entry %r", part)
        self._ids = ids
        if ids:
            logger.info("Loaded %d manually completed tasks", len(ids))

    def _save(self) -> None:
        self._store.set(MANUAL_COMPLETIONS_KEY, ",".join(str(i) for i in sorted(self._ids)))

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def ids(self) -> frozenset[int]:
        return frozenset(self._ids)

    def toggle(self, task_id: int) -> bool:
        """Flip the mark; returns True when the task is now marked complete."""
        if task_id in self._ids:
            self._ids.remove(task_id)
            logger.info("Unmarked task %s as manually complete", task_id)
            marked = False
        else:
            self._ids.add(task_id)
            logger.info("Marked task %s as manually complete", task_id)
            marked = True
        self._save()
        return marked

    def reset(self) -> None:
        self._ids.clear()
        self._save()
        logger.info("Cleared all manual completions")


def current_task(group: TargetGroup | None, manual: ManualCompletions | frozenset[int]) -> Task | None:
    """First task of the group (display order) that is neither complete nor manually marked."""
    if group is None:
        return None
    for t in group.tasks:
        if not t.is_complete and t.id not in manual:
            return t
    return None
