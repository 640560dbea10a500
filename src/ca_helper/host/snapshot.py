# src/ca_helper/host/snapshot.py

from __future__ import annotations

"""
File-backed host adapter.

The game client is not part of this package; a JSON dump of what it exposes
stands in for it:

    {
      "completion_words": [int, ...],
      "tier_thresholds": {"Easy": 33, ...} or [33, 143, ...],
      "tiers": {"Easy": [record_id, ...], ...},
      "records": {"<record_id>": {"task_id": int, "name": str, "description": str}}
    }
"""

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..core.models import DIFFICULTY_ORDER, CatalogRecord, Difficulty

logger = logging.getLogger(__name__)


def _int_list(raw: Any) -> list[int]:
    if not isinstance(raw, list):
        return []
    out: list[int] = []
    for v in raw:
        try:
            out.append(int(v))
        except (TypeError, ValueError):
            logger.warning("Skipping non-integer value %r", v)
    return out


def _parse_thresholds(raw: Any) -> dict[Difficulty, int]:
    out: dict[Difficulty, int] = {}
    if isinstance(raw, list):
        pairs = list(zip(DIFFICULTY_ORDER, raw))
    elif isinstance(raw, dict):
        pairs = [(d, raw.get(d.value)) for d in DIFFICULTY_ORDER]
    else:
        return out
    for tier, value in pairs:
        try:
            out[tier] = int(value)
        except (TypeError, ValueError):
            continue
    return out


def _parse_record(raw: Any) -> CatalogRecord | None:
    if not isinstance(raw, dict):
        return None
    try:
        task_id = int(raw["task_id"])
    except (KeyError, TypeError, ValueError):
        return None
    return CatalogRecord(
        task_id=task_id,
        name=str(raw.get("name") or ""),
        description=str(raw.get("description") or ""),
    )


@dataclass(slots=True)
class HostSnapshot:
    """Implements both CompletionSource and CatalogSource."""

    words: list[int] = field(default_factory=list)
    thresholds: dict[Difficulty, int] = field(default_factory=dict)
    tiers: dict[Difficulty, list[int]] = field(default_factory=dict)
    records: dict[int, Any] = field(default_factory=dict)

    # ---- CompletionSource ----

    def completion_words(self) -> Sequence[int]:
        return self.words

    def tier_threshold(self, tier: Difficulty) -> int | None:
        return self.thresholds.get(tier)

    # ---- CatalogSource ----

    def tier_record_ids(self, tier: Difficulty) -> Sequence[int]:
        return self.tiers.get(tier, [])

    def record(self, record_id: int) -> CatalogRecord | None:
        return _parse_record(self.records.get(record_id))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HostSnapshot:
        tiers_raw = data.get("tiers") if isinstance(data.get("tiers"), dict) else {}
        tiers = {d: _int_list(tiers_raw.get(d.value)) for d in DIFFICULTY_ORDER}

        records: dict[int, Any] = {}
        records_raw = data.get("records")
        if isinstance(records_raw, dict):
            for key, value in records_raw.items():
                try:
                    records[int(key)] = value
                except (TypeError, ValueError):
                    logger.warning("Skipping record with non-integer id %r", key)

        return cls(
            words=_int_list(data.get("completion_words")),
            thresholds=_parse_thresholds(data.get("tier_thresholds")),
            tiers=tiers,
            records=records,
        )

    @classmethod
    def load(cls, path: str | Path) -> HostSnapshot:
        """Missing or unreadable file -> empty snapshot (logged)."""
        p = Path(path)
        if not p.exists():
            logger.warning("Host snapshot not found: %s", p)
            return cls()
        try:
            data = json.loads(p.read_text("utf-8"))
        except (OSError, ValueError):
            logger.exception("Failed to read host snapshot %s", p)
            return cls()
        if not isinstance(data, dict):
            logger.warning("Host snapshot %s is not an object", p)
            return cls()
        snapshot = cls.from_dict(data)
        logger.info(
            "Host snapshot loaded: %d words, %d records from %s",
            len(snapshot.words),
            len(snapshot.records),
            p,
        )
        return snapshot


@dataclass(slots=True)
class StaticCompletionSource:
    """Completion words from elsewhere (e.g. Wiki Sync) with thresholds borrowed from a base source."""

    words: list[int]
    base: Any = None

    def completion_words(self) -> Sequence[int]:
        return self.words

    def tier_threshold(self, tier: Difficulty) -> int | None:
        if self.base is None:
            return None
        return self.base.tier_threshold(tier)
