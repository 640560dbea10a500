# tests/test_options.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from ca_helper.core.models import Difficulty
from ca_helper.routing.options import RoutingConfig, option_names


def test_from_settings_parses_tier_names() -> None:
    settings = SimpleNamespace(
        use_smart_routing=False,
        min_difficulty="medium",
        max_difficulty="nonsense",
        solo_content_only=True,
        hide_wilderness_content=False,
        auto_refresh_minutes=3,
    )
    cfg = RoutingConfig.from_settings(settings)
    assert cfg.use_smart_routing is False
    assert cfg.min_difficulty == Difficulty.MEDIUM
    assert cfg.max_difficulty == Difficulty.GRANDMASTER
    assert cfg.solo_content_only is True
    assert cfg.auto_refresh_minutes == 3


def test_with_value_parses_each_kind() -> None:
    cfg = RoutingConfig()
    assert cfg.with_value("use_smart_routing", "off").use_smart_routing is False
    assert cfg.with_value("min_difficulty", "Elite").min_difficulty == Difficulty.ELITE
    assert cfg.with_value("auto_refresh_minutes", "-4").auto_refresh_minutes == 0
    # frozen: the source config is unchanged
    assert cfg == RoutingConfig()


@pytest.mark.parametrize(
    ("key", "raw"),
    [
        ("nope", "1"),
        ("solo_content_only", "sometimes"),
        ("max_difficulty", "Legendary"),
        ("auto_refresh_minutes", "soon"),
    ],
)
def test_with_value_rejects_bad_input(key: str, raw: str) -> None:
    with pytest.raises(ValueError):
        RoutingConfig().with_value(key, raw)


def test_as_strings_covers_every_option() -> None:
    strings = RoutingConfig().as_strings()
    assert list(strings) == option_names()
    assert strings["use_smart_routing"] == "on"
    assert strings["min_difficulty"] == "Easy"
