# tests/test_engine.py

from __future__ import annotations

from ca_helper.cli.bootstrap import create_initial_state
from ca_helper.core.models import Difficulty, TaskCategory
from ca_helper.enrichment.wiki import FetchError
from ca_helper.routing.engine import (
    evaluated_tasks,
    find_target,
    get_points_breakdown,
    get_recommendations,
    refresh_throttled,
    update_routing,
)
from ca_helper.routing.refresh import RefreshThrottle

from .fakes import FakeCompletionSource, FakeFetcher, make_host, make_remote


def test_enriched_recommendations_after_load(state) -> None:
    assert state.enrichment.load().result(timeout=5.0) is True

    by_id = {t.id: t for t in evaluated_tasks(state)}
    assert by_id[40].category == TaskCategory.PERFECTION
    assert by_id[40].difficulty == Difficulty.ELITE
    assert by_id[1].is_complete is True
    assert by_id[1].completion_rate == 60.0

    keys = [g.key for g in get_recommendations(state)]
    assert sorted(keys) == ["Chaos Fanatic", "Vorkath", "Zulrah"]


def test_wiki_match_keeps_host_id_and_difficulty(settings) -> None:
    host = make_host([(42, "Kill Vorkath", Difficulty.MEDIUM)])
    fetcher = FakeFetcher([make_remote("kill vorkath", "Vorkath", Difficulty.HARD, category=TaskCategory.SPEED)])
    state = create_initial_state(settings=settings, host=host, fetcher=fetcher)
    state.enrichment.load().result(timeout=5.0)

    (task,) = evaluated_tasks(state)
    assert (task.id, task.difficulty, task.monster, task.category) == (42, Difficulty.MEDIUM, "Vorkath", TaskCategory.SPEED)


def test_failed_fetch_falls_back_to_host_only(settings, host) -> None:
    state = create_initial_state(settings=settings, host=host, fetcher=FakeFetcher(error=FetchError("offline")))

    assert state.enrichment.load().result(timeout=5.0) is False
    assert state.enrichment.is_loaded() is False

    monsters = {t.id: t.monster for t in evaluated_tasks(state)}
    assert monsters[41] == "Chaos Fanatic"
    assert all(t.category == TaskCategory.MECHANICAL for t in evaluated_tasks(state))


def test_unreadable_completion_reads_as_nothing_done(state) -> None:
    class Broken(FakeCompletionSource):
        def completion_words(self):
            raise RuntimeError("client not logged in")

    state.completion = Broken()
    assert not any(t.is_complete for t in evaluated_tasks(state))
    assert sum(get_points_breakdown(state).values()) == 0


def test_find_target_prefers_exact_match(state) -> None:
    assert find_target(state, "vorkath").total_count == 3
    assert find_target(state, "zul").key == "Zulrah"
    assert find_target(state, "") is None
    assert find_target(state, "olm") is None


def test_routing_update_is_persisted_and_reloaded(state, settings, host, fetcher) -> None:
    update_routing(state, state.routing.with_value("max_difficulty", "Hard"))
    assert [g.key for g in get_recommendations(state)] == ["Chaos Fanatic", "Vorkath"]

    again = create_initial_state(settings=settings, host=host, fetcher=fetcher)
    assert again.routing.max_difficulty == Difficulty.HARD


def test_refresh_throttled_coalesces(state) -> None:
    calls: list[int] = []
    state.throttle = RefreshThrottle(60.0)

    assert refresh_throttled(state, lambda: calls.append(1)) is True
    assert refresh_throttled(state, lambda: calls.append(1)) is False
    state.throttle.reset()
    assert refresh_throttled(state, lambda: calls.append(1)) is True
    assert calls == [1, 1]
