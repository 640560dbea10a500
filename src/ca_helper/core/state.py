# src/ca_helper/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from ..catalog.store import CatalogStore
from ..enrichment.service import EnrichmentService
from ..progress.manual import ManualCompletions
from ..progress.sync import WikiSyncClient
from ..routing.options import RoutingConfig
from ..routing.refresh import RefreshThrottle
from ..storage.preference_store import PreferenceStore
from .ports import CatalogSource, CompletionSource


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    catalog_source: CatalogSource
    completion: CompletionSource
    enrichment: EnrichmentService
    preferences: PreferenceStore
    manual: ManualCompletions
    routing: RoutingConfig
    throttle: RefreshThrottle

    # Optional: only needed by /sync.
    sync_client: WikiSyncClient | None = None

    # Rebuilt wholesale by reload_catalog(); never patched in place.
    catalog: CatalogStore = field(default_factory=CatalogStore)

    # Guards catalog/routing swaps between the console and the auto-refresh thread.
    lock: threading.RLock = field(default_factory=threading.RLock)
