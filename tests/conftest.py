# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from ca_helper.cli.bootstrap import create_initial_state
from ca_helper.core.models import Difficulty, TaskCategory
from ca_helper.core.state import AppState

from .fakes import FakeFetcher, make_host, make_remote


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the composition root.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="ca-helper-test",
        log_level="DEBUG",
        # Paths (tmp per test run)
        data_dir=tmp_path,
        cache_path=tmp_path / "ca-wiki-cache.json",
        preferences_db_path=tmp_path / "preferences.sqlite3",
        host_snapshot_path=tmp_path / "host_snapshot.json",
        # Wiki
        cache_ttl_days=7,
        wiki_api_url="https://wiki.invalid/api.php",
        wiki_page_title="Combat Achievements/All tasks",
        wiki_sync_url="https://sync.invalid/runelite/player",
        user_agent="ca-helper-tests",
        http_timeout_seconds=1.0,
        # Routing defaults
        use_smart_routing=True,
        min_difficulty="Easy",
        max_difficulty="Grandmaster",
        solo_content_only=False,
        hide_wilderness_content=False,
        auto_refresh_minutes=0,
        refresh_cooldown_ms=0,
        recommendation_limit=10,
        default_username=None,
    )


@pytest.fixture()
def host():
    return make_host(
        [
            (1, "Kill Vorkath", Difficulty.EASY),
            (2, "Vorkath Speedrun", Difficulty.MEDIUM),
            (3, "Vorkath Challenge", Difficulty.HARD),
            (40, "Defeat Zulrah", Difficulty.ELITE),
            (41, "Defeat the Chaos Fanatic in a solo raid", Difficulty.EASY),
        ],
        completed=[1],
    )


@pytest.fixture()
def fetcher() -> FakeFetcher:
    return FakeFetcher(
        [
            make_remote("Kill Vorkath", "Vorkath", Difficulty.EASY, completion_rate=60.0),
            make_remote(
                "Defeat Zulrah",
                "Zulrah",
                Difficulty.ELITE,
                category=TaskCategory.PERFECTION,
                completion_rate=5.0,
            ),
        ]
    )


@pytest.fixture()
def state(settings: SimpleNamespace, host, fetcher: FakeFetcher) -> AppState:
    """
    AppState built by the real composition root with a fake host and fetcher.

    NOTE: the preference store is real SQLite (tmp path) because its
    correctness is part of what we want to test.
    """
    return create_initial_state(settings=settings, host=host, fetcher=fetcher)
