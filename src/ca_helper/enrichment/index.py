# src/ca_helper/enrichment/index.py

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from ..catalog.names import normalize_task_name
from ..core.models import RemoteTask

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class EnrichmentIndex:
    """
    Wiki records keyed by normalized task name.

    Built once per fetch or cache load and then only read. On a key collision
    the first record wins.
    """

    records: tuple[RemoteTask, ...] = ()
    by_key: Mapping[str, RemoteTask] = field(default_factory=lambda: MappingProxyType({}))

    def __len__(self) -> int:
        return len(self.by_key)

    def lookup(self, name: str | None) -> RemoteTask | None:
        return self.by_key.get(normalize_task_name(name))


EMPTY_INDEX = EnrichmentIndex()


def build_index(records: Iterable[RemoteTask]) -> EnrichmentIndex:
    ordered = tuple(records)
    by_key: dict[str, RemoteTask] = {}
    collisions = 0
    for record in ordered:
        key = normalize_task_name(record.name)
        if not key:
            continue
        if key in by_key:
            collisions += 1
            logger.debug("Duplicate wiki task key %r; keeping first", key)
            continue
        by_key[key] = record

    if collisions:
        logger.info("Wiki index: %d name collisions ignored", collisions)
    return EnrichmentIndex(records=ordered, by_key=MappingProxyType(by_key))
