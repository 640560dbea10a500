# tests/test_decoder.py

from __future__ import annotations

from ca_helper.core.models import Difficulty
from ca_helper.progress.decoder import encode_completed_ids, is_task_complete, points_breakdown, total_points

from .fakes import make_task


def test_bit_position_within_first_word() -> None:
    words = [1 << 5]
    assert is_task_complete(words, 5) is True
    assert is_task_complete(words, 4) is False
    assert is_task_complete(words, 6) is False


def test_task_in_second_word() -> None:
    words = [0, 1 << 5]
    assert is_task_complete(words, 37) is True
    assert is_task_complete(words, 5) is False


def test_missing_word_reads_as_incomplete() -> None:
    words = [0xFFFFFFFF]
    assert is_task_complete(words, 31) is True
    assert is_task_complete(words, 32) is False
    assert is_task_complete([], 0) is False


def test_negative_id_is_incomplete() -> None:
    assert is_task_complete([0xFFFFFFFF], -1) is False


def test_signed_words_keep_the_high_bit() -> None:
    assert is_task_complete([-1], 31) is True
    assert is_task_complete([-2147483648], 31) is True
    assert is_task_complete([-2147483648], 0) is False


def test_non_integer_word_is_incomplete() -> None:
    assert is_task_complete(["garbage"], 0) is False  # type: ignore[list-item]


def test_encode_completed_ids_packs_words() -> None:
    assert encode_completed_ids([0, 33]) == [1, 2]
    assert encode_completed_ids([]) == []
    assert encode_completed_ids([-3, 2]) == [4]


def test_points_only_count_completed_tasks() -> None:
    tasks = [
        make_task(1, "a", Difficulty.EASY, is_complete=True),
        make_task(2, "b", Difficulty.HARD, is_complete=True),
        make_task(3, "c", Difficulty.GRANDMASTER),
    ]
    assert total_points(tasks) == 4

    breakdown = points_breakdown(tasks)
    assert breakdown[Difficulty.EASY] == 1
    assert breakdown[Difficulty.HARD] == 3
    assert breakdown[Difficulty.GRANDMASTER] == 0
    assert len(breakdown) == 6
