# src/ca_helper/core/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class Difficulty(StrEnum):
    """Combat achievement tier, ordered Easy < ... < Grandmaster."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    ELITE = "Elite"
    MASTER = "Master"
    GRANDMASTER = "Grandmaster"

    @property
    def rank(self) -> int:
        return DIFFICULTY_RANK[self]

    @property
    def points(self) -> int:
        return DIFFICULTY_POINTS[self]

    @classmethod
    def from_name(cls, raw: str | None, default: Difficulty | None = None) -> Difficulty | None:
        """Exact (case-insensitive) tier name lookup; used for config and cache values."""
        if not raw or not isinstance(raw, str):
            return default
        key = raw.strip().lower()
        for d in cls:
            if d.value.lower() == key:
                return d
        return default


# Tier order, rank and points.
DIFFICULTY_ORDER: tuple[Difficulty, ...] = (
    Difficulty.EASY,
    Difficulty.MEDIUM,
    Difficulty.HARD,
    Difficulty.ELITE,
    Difficulty.MASTER,
    Difficulty.GRANDMASTER,
)

DIFFICULTY_RANK: dict[Difficulty, int] = {d: i for i, d in enumerate(DIFFICULTY_ORDER)}

DIFFICULTY_POINTS: dict[Difficulty, int] = {d: i + 1 for i, d in enumerate(DIFFICULTY_ORDER)}


class TaskCategory(StrEnum):
    """Task kind as named on the wiki."""

    KILL_COUNT = "Kill Count"
    MECHANICAL = "Mechanical"
    PERFECTION = "Perfection"
    RESTRICTION = "Restriction"
    STAMINA = "Stamina"
    SPEED = "Speed"
    FLAWLESS = "Flawless"
    GROUP_SIZE = "Group Size"

    @classmethod
    def from_text(cls, raw: str | None) -> TaskCategory:
        """
        Match free text against the eight category names.

        Case-insensitive equality or substring; anything unrecognised is Kill Count.
        """
        if not raw:
            return cls.KILL_COUNT
        text = raw.strip().lower()
        for cat in cls:
            name = cat.value.lower()
            if text == name or name in text:
                return cat
        return cls.KILL_COUNT


@dataclass(slots=True, frozen=True)
class CatalogRecord:
    """One struct read from the host catalog: no monster/target at this layer."""

    task_id: int
    name: str
    description: str = ""


@dataclass(slots=True, frozen=True)
class Task:
    """
    A single combat achievement as used by routing.

    Notes:
    - `points` is derived from `difficulty`, never stored.
    - `is_complete` is the decoded completion flag for the current evaluation.
    - `completion_rate` is the population-wide percentage from the wiki (0 when unknown).
    """

    id: int
    name: str
    difficulty: Difficulty
    monster: str
    category: TaskCategory
    description: str = ""
    completion_rate: float = 0.0
    prerequisite_ids: frozenset[int] = field(default_factory=frozenset)
    is_complete: bool = False

    def __post_init__(self) -> None:
        if self.id in self.prerequisite_ids:
            raise ValueError(f"task {self.id} cannot be its own prerequisite")

    @property
    def points(self) -> int:
        return DIFFICULTY_POINTS[self.difficulty]


@dataclass(slots=True, frozen=True)
class RemoteTask:
    """One row of wiki metadata; also the on-disk cache record shape."""

    name: str
    monster: str
    difficulty: Difficulty
    category: TaskCategory
    description: str = ""
    completion_rate: float = 0.0
    prerequisite_ids: tuple[int, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "monster": self.monster,
            "difficulty": self.difficulty.value,
            "category": self.category.value,
            "description": self.description,
            "completion_rate": self.completion_rate,
            "prerequisite_ids": list(self.prerequisite_ids),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RemoteTask:
        """Strict inverse of to_dict; raises ValueError on a malformed record."""
        if not isinstance(data, dict):
            raise ValueError("record is not an object")

        name = data.get("name")
        monster = data.get("monster")
        if not isinstance(name, str) or not name.strip():
            raise ValueError("record has no name")
        if not isinstance(monster, str):
            raise ValueError("record has no monster")

        raw_difficulty = data.get("difficulty")
        if not isinstance(raw_difficulty, str):
            raise ValueError(f"record difficulty is not text: {raw_difficulty!r}")
        difficulty = Difficulty.from_name(raw_difficulty)
        if difficulty is None:
            raise ValueError(f"record has unknown difficulty: {data.get('difficulty')!r}")

        raw_category = data.get("category")
        if not isinstance(raw_category, str):
            raise ValueError(f"record category is not text: {raw_category!r}")
        try:
            category = TaskCategory(raw_category)
        except ValueError:
            raise ValueError(f"record has unknown category: {raw_category!r}") from None

        prereqs = data.get("prerequisite_ids") or []
        if not isinstance(prereqs, list):
            raise ValueError("prerequisite_ids is not a list")

        return cls(
            name=name,
            monster=monster,
            difficulty=difficulty,
            category=category,
            description=str(data.get("description") or ""),
            completion_rate=float(data.get("completion_rate") or 0.0),
            prerequisite_ids=tuple(int(p) for p in prereqs),
        )


@dataclass(slots=True, frozen=True)
class TargetGroup:
    """
    All tasks for one boss/monster, recomputed on every scoring pass.

    `tasks` is in display order: incomplete tasks by name, then complete tasks by name.
    `score` is the low-hanging-fruit score (sentinel -1.0 when nothing is left to do).
    """

    key: str
    tasks: tuple[Task, ...]
    completed_count: int
    total_count: int
    score: float

    @property
    def incomplete_tasks(self) -> list[Task]:
        return [t for t in self.tasks if not t.is_complete]

    @property
    def is_complete(self) -> bool:
        return self.completed_count >= self.total_count

    @property
    def completion_percentage(self) -> float:
        if self.total_count <= 0:
            return 0.0
        return 100.0 * self.completed_count / self.total_count
