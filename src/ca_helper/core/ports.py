# src/ca_helper/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the host client, the wiki and local storage swappable and makes testing easier.
"""

from typing import Protocol, Sequence

from .models import CatalogRecord, Difficulty, RemoteTask


class CompletionSource(Protocol):
    """
    Host-side completion state.

    - completion_words(): ordered 32-bit words, bit i of word w is task (w * 32 + i).
    - tier_threshold(): live points threshold for a tier, or None / <= 0 when unavailable.
    """

    def completion_words(self) -> Sequence[int]: ...
    def tier_threshold(self, tier: Difficulty) -> int | None: ...


class CatalogSource(Protocol):
    """
    Host-side static catalog.

    For each tier an ordered list of opaque record ids; each record resolves to
    (task id, name, description) or None when the host cannot provide it.
    """

    def tier_record_ids(self, tier: Difficulty) -> Sequence[int]: ...
    def record(self, record_id: int) -> CatalogRecord | None: ...


class MetadataFetcher(Protocol):
    """Remote metadata boundary. Raises on failure of the whole attempt."""

    def fetch_all(self) -> list[RemoteTask]: ...


class KeyValueStore(Protocol):
    def get(self, key: str, default: str | None = None) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def delete(self, key: str) -> None: ...
