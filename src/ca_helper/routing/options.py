# src/ca_helper/routing/options.py

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Any

from ..core.models import Difficulty
from ..core.ports import KeyValueStore

logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "yes", "y", "on"}
_FALSE = {"0", "false", "no", "n", "off"}


@dataclass(slots=True, frozen=True)
class RoutingConfig:
    """User-facing routing options (one value per recommendation pass)."""

    use_smart_routing: bool = True
    min_difficulty: Difficulty = Difficulty.EASY
    max_difficulty: Difficulty = Difficulty.GRANDMASTER
    solo_content_only: bool = False
    hide_wilderness_content: bool = False
    auto_refresh_minutes: int = 0

    @classmethod
    def from_settings(cls, settings: Any) -> RoutingConfig:
        return cls(
            use_smart_routing=bool(getattr(settings, "use_smart_routing", True)),
            min_difficulty=Difficulty.from_name(getattr(settings, "min_difficulty", None), Difficulty.EASY)
            or Difficulty.EASY,
            max_difficulty=Difficulty.from_name(getattr(settings, "max_difficulty", None), Difficulty.GRANDMASTER)
            or Difficulty.GRANDMASTER,
            solo_content_only=bool(getattr(settings, "solo_content_only", False)),
            hide_wilderness_content=bool(getattr(settings, "hide_wilderness_content", False)),
            auto_refresh_minutes=int(getattr(settings, "auto_refresh_minutes", 0) or 0),
        )

    def with_value(self, key: str, raw: str) -> RoutingConfig:
        """Return a copy with one option parsed from text. Raises ValueError on bad input."""
        if key not in option_names():
            raise ValueError(f"unknown option: {key}")

        current = getattr(self, key)
        value: Any
        if isinstance(current, bool):
            text = raw.strip().lower()
            if text in _TRUE:
                value = True
            elif text in _FALSE:
                value = False
            else:
                raise ValueError(f"{key} expects on/off, got {raw!r}")
        elif isinstance(current, Difficulty):
            value = Difficulty.from_name(raw)
            if value is None:
                raise ValueError(f"{key} expects a tier name, got {raw!r}")
        else:
            try:
                value = max(0, int(raw))
            except ValueError:
                raise ValueError(f"{key} expects a number, got {raw!r}") from None

        return replace(self, **{key: value})

    def as_strings(self) -> dict[str, str]:
        out: dict[str, str] = {}
        for name in option_names():
            v = getattr(self, name)
            if isinstance(v, bool):
                out[name] = "on" if v else "off"
            else:
                out[name] = str(v)
        return out


def option_names() -> list[str]:
    return [f.name for f in fields(RoutingConfig)]


def load_routing_config(base: RoutingConfig, store: KeyValueStore) -> RoutingConfig:
    """Layer stored preferences over `base`; bad stored values are ignored."""
    cfg = base
    for name in option_names():
        raw = store.get(name)
        if raw is None:
            continue
        try:
            cfg = cfg.with_value(name, raw)
        except ValueError as e:
            logger.warning("Ignoring stored preference %s=%r: %s", name, raw, e)
    return cfg


def save_routing_config(cfg: RoutingConfig, store: KeyValueStore) -> None:
    for name, value in cfg.as_strings().items():
        store.set(name, value)
