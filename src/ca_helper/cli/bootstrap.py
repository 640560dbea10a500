# src/ca_helper/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (host snapshot, wiki cache/fetcher,
  preference store, refresh throttle),
- builds the initial catalog.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import MetadataFetcher
from ..core.state import AppState
from ..enrichment.cache import MetadataCache
from ..enrichment.service import EnrichmentService
from ..enrichment.wiki import WikiMetadataFetcher
from ..host.snapshot import HostSnapshot
from ..progress.manual import ManualCompletions
from ..progress.sync import WikiSyncClient
from ..routing.engine import reload_catalog
from ..routing.options import RoutingConfig, load_routing_config
from ..routing.refresh import RefreshThrottle
from ..storage.preference_store import PreferenceStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.cache_path.parent.mkdir(parents=True, exist_ok=True)
    settings.preferences_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    host: HostSnapshot | None = None,
    fetcher: MetadataFetcher | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings(). `host` and `fetcher` replace the
    file-backed snapshot and the live wiki fetcher.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if host is None:
        host = HostSnapshot.load(settings.host_snapshot_path)

    cache = MetadataCache(settings.cache_path, ttl_days=settings.cache_ttl_days)
    enrichment = EnrichmentService(cache, fetcher or WikiMetadataFetcher.from_settings(settings))

    preferences = PreferenceStore(settings.preferences_db_path)
    routing = load_routing_config(RoutingConfig.from_settings(settings), preferences)

    state = AppState(
        settings=settings,
        catalog_source=host,
        completion=host,
        enrichment=enrichment,
        preferences=preferences,
        manual=ManualCompletions(preferences),
        routing=routing,
        throttle=RefreshThrottle(settings.refresh_cooldown_ms / 1000.0),
        sync_client=WikiSyncClient.from_settings(settings),
    )

    count = reload_catalog(state)
    logger.info("Catalog ready: %d tasks", count)
    return state
