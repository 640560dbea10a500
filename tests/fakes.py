# tests/fakes.py

from __future__ import annotations

import threading
from collections.abc import Iterable, Sequence

from ca_helper.core.models import DIFFICULTY_ORDER, CatalogRecord, Difficulty, RemoteTask, Task, TaskCategory
from ca_helper.host.snapshot import HostSnapshot
from ca_helper.progress.decoder import encode_completed_ids


def make_task(
    task_id: int,
    name: str,
    difficulty: Difficulty = Difficulty.EASY,
    *,
    monster: str | None = None,
    category: TaskCategory = TaskCategory.KILL_COUNT,
    description: str = "",
    completion_rate: float = 0.0,
    is_complete: bool = False,
) -> Task:
    return Task(
        id=task_id,
        name=name,
        difficulty=difficulty,
        monster=monster if monster is not None else name,
        category=category,
        description=description,
        completion_rate=completion_rate,
        is_complete=is_complete,
    )


def make_remote(
    name: str,
    monster: str,
    difficulty: Difficulty = Difficulty.EASY,
    *,
    category: TaskCategory = TaskCategory.KILL_COUNT,
    description: str = "",
    completion_rate: float = 0.0,
) -> RemoteTask:
    return RemoteTask(
        name=name,
        monster=monster,
        difficulty=difficulty,
        category=category,
        description=description,
        completion_rate=completion_rate,
    )


def make_host(
    rows: Iterable[tuple[int, str, Difficulty]],
    *,
    completed: Iterable[int] = (),
    thresholds: dict[Difficulty, int] | None = None,
) -> HostSnapshot:
    """HostSnapshot with one record per (task_id, name, difficulty) row."""
    tiers: dict[Difficulty, list[int]] = {d: [] for d in DIFFICULTY_ORDER}
    records: dict[int, dict[str, object]] = {}
    for i, (task_id, name, difficulty) in enumerate(rows):
        record_id = 1000 + i
        tiers[difficulty].append(record_id)
        records[record_id] = {"task_id": task_id, "name": name, "description": ""}
    return HostSnapshot(
        words=encode_completed_ids(completed),
        thresholds=dict(thresholds or {}),
        tiers=tiers,
        records=records,
    )


class FakeCatalogSource:
    """
    CatalogSource backed by plain dicts.

    A record value that is an Exception instance is raised by record().
    """

    def __init__(
        self,
        tiers: dict[Difficulty, Sequence[int]],
        records: dict[int, CatalogRecord | Exception | None],
    ) -> None:
        self.tiers = tiers
        self.records = records

    def tier_record_ids(self, tier: Difficulty) -> Sequence[int]:
        return self.tiers.get(tier, [])

    def record(self, record_id: int) -> CatalogRecord | None:
        value = self.records.get(record_id)
        if isinstance(value, Exception):
            raise value
        return value


class FakeCompletionSource:
    """Thresholds may be ints, None, or exceptions (raised on read)."""

    def __init__(self, words: Sequence[int] = (), thresholds: dict[Difficulty, object] | None = None) -> None:
        self.words = list(words)
        self.thresholds = thresholds or {}

    def completion_words(self) -> Sequence[int]:
        return self.words

    def tier_threshold(self, tier: Difficulty) -> int | None:
        value = self.thresholds.get(tier)
        if isinstance(value, Exception):
            raise value
        return value  # type: ignore[return-value]


class FakeFetcher:
    """
    Deterministic MetadataFetcher.

    - Returns `records` or raises `error`
    - Optional `gate`: fetch_all() blocks until it is set (for single-flight tests)
    """

    def __init__(
        self,
        records: Sequence[RemoteTask] = (),
        *,
        error: Exception | None = None,
        gate: threading.Event | None = None,
    ) -> None:
        self.records = list(records)
        self.error = error
        self.gate = gate
        self.calls = 0

    def fetch_all(self) -> list[RemoteTask]:
        self.calls += 1
        if self.gate is not None:
            self.gate.wait(timeout=5.0)
        if self.error is not None:
            raise self.error
        return list(self.records)
