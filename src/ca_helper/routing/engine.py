# src/ca_helper/routing/engine.py

from __future__ import annotations

"""
High-level helpers used by connectors.

Each call reads the current snapshots off AppState and runs the pure pipeline:
decode -> merge -> filter -> group -> rank.
"""

import logging
from collections.abc import Callable

from ..catalog.names import normalize_task_name
from ..catalog.store import load_catalog
from ..core.models import Difficulty, TargetGroup, Task
from ..core.state import AppState
from ..progress.decoder import points_breakdown
from ..progress.tiers import TierProgress, build_tier_progress, resolve_thresholds
from .options import RoutingConfig, save_routing_config
from .scoring import build_group, recommend

logger = logging.getLogger(__name__)


def reload_catalog(state: AppState) -> int:
    """Rebuild the host catalog from scratch. Returns the task count."""
    catalog = load_catalog(state.catalog_source)
    with state.lock:
        state.catalog = catalog
    return len(catalog)


def evaluated_tasks(state: AppState) -> list[Task]:
    """All host tasks with completion attached and wiki data merged in (if loaded)."""
    catalog = state.catalog
    try:
        words = list(state.completion.completion_words())
    except Exception:
        logger.exception("Failed to read completion words; treating everything as incomplete")
        words = []
    return state.enrichment.enriched_tasks(catalog.evaluate(words))


def get_recommendations(state: AppState, limit: int | None = None) -> list[TargetGroup]:
    if limit is None:
        limit = int(getattr(state.settings, "recommendation_limit", 10) or 0)
    return recommend(evaluated_tasks(state), state.routing, limit)


def find_target(state: AppState, name: str) -> TargetGroup | None:
    """Every task (filters not applied) for the target whose name best matches `name`."""
    key = normalize_task_name(name)
    if not key:
        return None
    tasks = evaluated_tasks(state)
    exact = [t for t in tasks if normalize_task_name(t.monster) == key]
    if not exact:
        partial = sorted({t.monster for t in tasks if key in normalize_task_name(t.monster)})
        if not partial:
            return None
        exact = [t for t in tasks if t.monster == partial[0]]
    return build_group(exact[0].monster, exact)


def get_tier_progress(state: AppState) -> TierProgress:
    return build_tier_progress(evaluated_tasks(state), resolve_thresholds(state.completion))


def get_points_breakdown(state: AppState) -> dict[Difficulty, int]:
    return points_breakdown(evaluated_tasks(state))


def update_routing(state: AppState, cfg: RoutingConfig) -> None:
    with state.lock:
        state.routing = cfg
    save_routing_config(cfg, state.preferences)
    logger.info("Routing options updated: %s", cfg.as_strings())


def refresh_throttled(state: AppState, on_refresh: Callable[[], None]) -> bool:
    """Run `on_refresh` unless another refresh was accepted within the cooldown."""
    if not state.throttle.try_acquire():
        logger.debug("Refresh coalesced (cooldown)")
        return False
    on_refresh()
    return True
