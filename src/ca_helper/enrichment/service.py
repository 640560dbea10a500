# src/ca_helper/enrichment/service.py

from __future__ import annotations

"""
Wiki snapshot lifecycle: absent -> loading -> loaded.

- The cache is tried synchronously on the caller's thread (cheap, local file).
- A cache miss starts at most one background worker: fetch -> index -> save -> publish.
- The index is built completely before it is published with a single assignment,
  so readers see either the previous snapshot or the new one.
- Subscribers are told "data changed" once per successful cache load or fetch,
  and again on every load() call made after the snapshot is already loaded.
"""

import logging
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import Future

from ..core.models import Task
from ..core.ports import MetadataFetcher
from .cache import MetadataCache
from .index import EnrichmentIndex, build_index
from .merge import enrich

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


def _resolved(value: bool) -> Future[bool]:
    fut: Future[bool] = Future()
    fut.set_result(value)
    return fut


class EnrichmentService:
    def __init__(self, cache: MetadataCache, fetcher: MetadataFetcher) -> None:
        self._cache = cache
        self._fetcher = fetcher

        self._lock = threading.Lock()
        # Serializes load()/clear_cache() so two callers never race a cache read against a worker start.
        self._load_lock = threading.Lock()

        self._snapshot: EnrichmentIndex | None = None
        self._inflight: Future[bool] | None = None
        self._cancel_event = threading.Event()
        self._worker: threading.Thread | None = None
        self._listeners: list[Listener] = []

    # ---- observers ----

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener()
            except Exception:
                logger.exception("Enrichment listener failed")

    # ---- snapshot ----

    def is_loaded(self) -> bool:
        return self._snapshot is not None

    def is_loading(self) -> bool:
        fut = self._inflight
        return fut is not None and not fut.done()

    def index(self) -> EnrichmentIndex | None:
        return self._snapshot

    def _publish(self, index: EnrichmentIndex) -> None:
        with self._lock:
            self._snapshot = index

    def enriched_tasks(self, tasks: Iterable[Task]) -> list[Task]:
        snapshot = self._snapshot
        if snapshot is None:
            logger.debug("Wiki data not loaded yet - returning host-only tasks")
        return enrich(tasks, snapshot)

    # ---- loading ----

    def load(self) -> Future[bool]:
        """
        Make the wiki snapshot available.

        Returns a future resolving to True when a snapshot is published (or was
        already), False when the attempt failed or was cancelled.
        """
        with self._load_lock:
            if self._snapshot is not None:
                logger.info("Wiki data already loaded")
                result = _resolved(True)
            else:
                inflight = self._inflight
                if inflight is not None and not inflight.done():
                    logger.debug("Wiki fetch already in flight; joining it")
                    return inflight

                logger.info("Attempting to load wiki data from cache...")
                hit = self._cache.load()
                if not hit.found:
                    logger.info("Cache miss or expired - loading fresh wiki data in background")
                    return self._start_worker()

                self._publish(build_index(hit.records))
                logger.info("Wiki data loaded from cache (%d tasks)", len(hit.records))
                result = _resolved(True)

        # Listeners run outside the load lock so they may call back into the service.
        self._notify()
        return result

    def _start_worker(self) -> Future[bool]:
        fut: Future[bool] = Future()
        cancel = threading.Event()
        with self._lock:
            self._inflight = fut
            self._cancel_event = cancel

        worker = threading.Thread(
            target=self._run_fetch,
            args=(fut, cancel),
            name="WikiDataLoader",
            daemon=True,
        )
        self._worker = worker
        worker.start()
        return fut

    def _run_fetch(self, fut: Future[bool], cancel: threading.Event) -> None:
        ok = False
        try:
            records = self._fetcher.fetch_all()
            if cancel.is_set():
                logger.info("Wiki fetch cancelled after download")
                return

            index = build_index(records)
            if not len(index):
                logger.error("Wiki fetch produced no usable tasks")
                return

            # Save and publish are serialized with clear_cache().
            with self._load_lock:
                if cancel.is_set():
                    logger.info("Wiki fetch cancelled before publish")
                    return
                self._cache.save(records)
                self._publish(index)
            ok = True
            logger.info("Wiki data loaded: %d tasks", len(index))
            self._notify()
        except Exception:
            logger.exception("Failed to load fresh wiki data")
        finally:
            with self._lock:
                if self._inflight is fut:
                    self._inflight = None
            fut.set_result(ok)

    def cancel(self) -> None:
        """Ask an in-flight worker to drop its result. No-op when idle."""
        self._cancel_event.set()

    def join(self, timeout: float | None = None) -> None:
        worker = self._worker
        if worker is not None:
            worker.join(timeout=timeout)

    def clear_cache(self) -> None:
        """Drop any in-flight fetch, remove the cache file and forget the published snapshot."""
        self.cancel()
        with self._load_lock:
            self._cache.clear()
            with self._lock:
                self._snapshot = None
        logger.info("Wiki snapshot cleared")
