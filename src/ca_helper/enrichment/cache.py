# src/ca_helper/enrichment/cache.py

from __future__ import annotations

import contextlib
import json
import logging
import os
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from ..core.models import RemoteTask

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(slots=True, frozen=True)
class CacheLoad:
    """Result of MetadataCache.load(): found=False is a miss, records is then empty."""

    records: list[RemoteTask] = field(default_factory=list)
    found: bool = False


class MetadataCache:
    """
    JSON file holding the last successful wiki fetch.

    - Age comes from the file's modification time, not from anything inside it.
    - A missing, unreadable, malformed, empty or expired file is a miss.
    - save() writes to a sibling temp file and renames it over the target, so a
      reader sees either the old file or the new one.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        ttl_days: float = 7,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._path = Path(path)
        self._ttl_seconds = float(ttl_days) * SECONDS_PER_DAY
        self._clock = clock

    @property
    def path(self) -> Path:
        return self._path

    def age_seconds(self) -> float | None:
        try:
            mtime = self._path.stat().st_mtime
        except OSError:
            return None
        return max(0.0, self._clock() - mtime)

    def load(self) -> CacheLoad:
        age = self.age_seconds()
        if age is None:
            logger.debug("Cache file doesn't exist: %s", self._path)
            return CacheLoad()

        if age > self._ttl_seconds:
            logger.info("Cache expired (%.1f days old), fetching fresh data", age / SECONDS_PER_DAY)
            return CacheLoad()

        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.warning("Cache file unreadable: %s", self._path, exc_info=True)
            return CacheLoad()

        if not isinstance(data, list) or not data:
            logger.warning("Cache file empty or invalid: %s", self._path)
            return CacheLoad()

        try:
            records = [RemoteTask.from_dict(item) for item in data]
        except (TypeError, ValueError) as e:
            logger.warning("Cache file has malformed records (%s): %s", e, self._path)
            return CacheLoad()

        logger.info("Loaded %d tasks from cache (%.1f days old)", len(records), age / SECONDS_PER_DAY)
        return CacheLoad(records=records, found=True)

    def save(self, records: Sequence[RemoteTask]) -> bool:
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            payload = [r.to_dict() for r in records]
            tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
        except OSError:
            logger.exception("Failed to save cache to %s", self._path)
            with contextlib.suppress(OSError):
                tmp.unlink()
            return False

        logger.info("Saved %d tasks to cache %s", len(records), self._path)
        return True

    def clear(self) -> None:
        with contextlib.suppress(FileNotFoundError):
            self._path.unlink()
            logger.info("Cache cleared: %s", self._path)
