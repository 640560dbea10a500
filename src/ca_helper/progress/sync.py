# src/ca_helper/progress/sync.py

from __future__ import annotations

"""
Player progress from the wiki's sync service.

Useful when no live host session is available: the completed ids are packed
into completion words so the same decoder handles both sources.
"""

import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import httpx

from .decoder import encode_completed_ids

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class PlayerProgress:
    completed_ids: frozenset[int] = field(default_factory=frozenset)

    @property
    def completed_count(self) -> int:
        return len(self.completed_ids)

    def is_completed(self, task_id: int) -> bool:
        return task_id in self.completed_ids

    def to_completion_words(self) -> list[int]:
        return encode_completed_ids(sorted(self.completed_ids))


class WikiSyncClient:
    def __init__(
        self,
        *,
        base_url: str,
        user_agent: str,
        timeout_seconds: float = 20.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._headers = {"User-Agent": user_agent}
        self._timeout = httpx.Timeout(timeout_seconds, connect=min(5.0, timeout_seconds))
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Any) -> WikiSyncClient:
        return cls(
            base_url=settings.wiki_sync_url,
            user_agent=settings.user_agent,
            timeout_seconds=float(getattr(settings, "http_timeout_seconds", 20.0)),
        )

    def fetch_player_progress(self, username: str) -> PlayerProgress:
        """Never raises: any failure is logged and yields empty progress."""
        name = (username or "").strip()
        if not name:
            return PlayerProgress()

        url = f"{self._base_url}/{quote(name, safe='')}/combat-achievements"
        try:
            with httpx.Client(headers=self._headers, timeout=self._timeout, transport=self._transport) as client:
                response = client.get(url)
        except httpx.HTTPError:
            logger.exception("Failed to fetch Wiki Sync data for %s", name)
            return PlayerProgress()

        if not response.is_success:
            logger.warning("Wiki Sync returned non-successful response: %s", response.status_code)
            return PlayerProgress()

        try:
            payload = response.json()
        except ValueError:
            logger.error("Error parsing Wiki Sync response for %s", name)
            return PlayerProgress()

        completed = payload.get("completed") if isinstance(payload, dict) else None
        if not isinstance(completed, list):
            logger.warning("Wiki Sync response has no completed list for %s", name)
            return PlayerProgress()

        ids: set[int] = set()
        for raw in completed:
            try:
                ids.add(int(raw))
            except (TypeError, ValueError):
                logger.debug("Skipping non-integer completed id %r", raw)

        logger.info("Wiki Sync: %s has %d completed tasks", name, len(ids))
        return PlayerProgress(completed_ids=frozenset(ids))
