# src/ca_helper/progress/decoder.py

from __future__ import annotations

"""
Completion bit decoding.

The host packs completion flags into 32-bit words: task id N lives at bit (N % 32)
of word (N // 32). Anything we cannot resolve is reported as incomplete, never raised:
a task newer than the known words must not read as done.
"""

import logging
from collections.abc import Iterable, Sequence

from ..core.models import DIFFICULTY_ORDER, Difficulty, Task

logger = logging.getLogger(__name__)

WORD_BITS = 32
_WORD_MASK = 0xFFFFFFFF


def is_task_complete(words: Sequence[int], task_id: int) -> bool:
    if task_id < 0:
        return False

    word_index, bit_index = divmod(task_id, WORD_BITS)
    if word_index >= len(words):
        logger.debug(
            "Task %s needs unknown word index %s (have %s) - treating as incomplete",
            task_id,
            word_index,
            len(words),
        )
        return False

    try:
        # Host words may arrive as signed ints; bit 31 must still be readable.
        word = int(words[word_index]) & _WORD_MASK
    except (TypeError, ValueError):
        logger.warning("Completion word %s is not an integer: %r", word_index, words[word_index])
        return False

    return (word >> bit_index) & 1 == 1


def encode_completed_ids(task_ids: Iterable[int]) -> list[int]:
    """Pack task ids into completion words (inverse of is_task_complete for valid ids)."""
    words: list[int] = []
    for task_id in task_ids:
        if task_id < 0:
            continue
        word_index, bit_index = divmod(int(task_id), WORD_BITS)
        if word_index >= len(words):
            words.extend([0] * (word_index + 1 - len(words)))
        words[word_index] |= 1 << bit_index
    return words


def total_points(tasks: Iterable[Task]) -> int:
    return sum(t.points for t in tasks if t.is_complete)


def points_breakdown(tasks: Iterable[Task]) -> dict[Difficulty, int]:
    """Earned points per tier (every tier present, zero when nothing earned)."""
    out = {d: 0 for d in DIFFICULTY_ORDER}
    for t in tasks:
        if t.is_complete:
            out[t.difficulty] += t.points
    return out
