# tests/test_filters.py

from __future__ import annotations

import itertools

from ca_helper.core.models import Difficulty, TaskCategory
from ca_helper.routing.filters import apply_filters, in_difficulty_band, is_group_content, is_wilderness_content
from ca_helper.routing.options import RoutingConfig

from .fakes import make_task


def test_group_size_category_is_always_group() -> None:
    t = make_task(1, "Solo something", category=TaskCategory.GROUP_SIZE)
    assert is_group_content(t) is True


def test_group_patterns_in_name_and_description() -> None:
    assert is_group_content(make_task(1, "Duo Nightmare")) is True
    assert is_group_content(make_task(2, "Nightmare", description="Kill it in a group of 5 players")) is True
    assert is_group_content(make_task(3, "Kill Vorkath")) is False


def test_explicit_solo_overrides_group_phrases() -> None:
    t = make_task(1, "Solo Nightmare", description="Unlike the 5-man version, no other players")
    assert is_group_content(t) is False


def test_wilderness_detection_uses_name_monster_and_description() -> None:
    assert is_wilderness_content(make_task(1, "Kill Callisto")) is True
    assert is_wilderness_content(make_task(2, "Kill it", monster="Revenant Dragon")) is True
    assert is_wilderness_content(make_task(3, "Kill", description="Somewhere in the Wilderness")) is True
    assert is_wilderness_content(make_task(4, "Kill Vorkath")) is False


def _tasks():
    return [
        make_task(1, "Kill Vorkath", Difficulty.EASY),
        make_task(2, "Duo Nightmare", Difficulty.HARD),
        make_task(3, "Kill Callisto", Difficulty.MEDIUM),
        make_task(4, "Zulrah Speedrun", Difficulty.ELITE),
        make_task(5, "Inferno", Difficulty.GRANDMASTER),
    ]


def test_difficulty_band_is_inclusive() -> None:
    cfg = RoutingConfig(min_difficulty=Difficulty.MEDIUM, max_difficulty=Difficulty.ELITE)
    assert [t.id for t in apply_filters(_tasks(), cfg)] == [2, 3, 4]


def test_solo_and_wilderness_filters() -> None:
    cfg = RoutingConfig(solo_content_only=True, hide_wilderness_content=True)
    assert [t.id for t in apply_filters(_tasks(), cfg)] == [1, 4, 5]


def test_filters_are_order_independent() -> None:
    cfg = RoutingConfig(
        min_difficulty=Difficulty.EASY,
        max_difficulty=Difficulty.ELITE,
        solo_content_only=True,
        hide_wilderness_content=True,
    )
    expected = {t.id for t in apply_filters(_tasks(), cfg)}
    for perm in itertools.permutations(_tasks()):
        assert {t.id for t in apply_filters(list(perm), cfg)} == expected


def test_filter_steps_commute() -> None:
    cfg = RoutingConfig(min_difficulty=Difficulty.MEDIUM, max_difficulty=Difficulty.GRANDMASTER)
    steps = [
        lambda t: in_difficulty_band(t, cfg.min_difficulty, cfg.max_difficulty),
        lambda t: not is_group_content(t),
        lambda t: not is_wilderness_content(t),
    ]
    tasks = _tasks() + [
        make_task(6, "Kill Scorpia", Difficulty.HARD),
        make_task(7, "Trio Tombs", Difficulty.EASY),
        make_task(8, "Solo Theatre", Difficulty.MASTER, description="No other players"),
    ]

    results = set()
    for order in itertools.permutations(steps):
        kept = tasks
        for step in order:
            kept = [t for t in kept if step(t)]
        results.add(frozenset(t.id for t in kept))

    assert results == {frozenset({4, 5, 8})}
    cfg_all = RoutingConfig(
        min_difficulty=Difficulty.MEDIUM, solo_content_only=True, hide_wilderness_content=True
    )
    assert {t.id for t in apply_filters(tasks, cfg_all)} == {4, 5, 8}
