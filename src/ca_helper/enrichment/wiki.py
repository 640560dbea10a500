# src/ca_helper/enrichment/wiki.py

from __future__ import annotations

"""
Wiki metadata fetcher.

One request to the MediaWiki parse API for the rendered "All tasks" page, then a
walk over the rendered <table class="wikitable"> rows. Row-level problems skip
the row; anything that makes the whole page unusable raises FetchError.
"""

import logging
import re
from typing import Any

import httpx
from selectolax.lexbor import LexborHTMLParser, LexborNode

from ..catalog.names import extract_monster_name
from ..core.models import Difficulty, RemoteTask, TaskCategory

logger = logging.getLogger(__name__)

MIN_CELLS = 6

_COMPLETION_PATTERN = re.compile(r"([0-9.]+)%")
_WHITESPACE = re.compile(r"\s+")

# Substring order matters: "grandmaster" contains "master".
_TIER_MATCH_ORDER: tuple[Difficulty, ...] = (
    Difficulty.GRANDMASTER,
    Difficulty.MASTER,
    Difficulty.ELITE,
    Difficulty.HARD,
    Difficulty.MEDIUM,
    Difficulty.EASY,
)


class FetchError(RuntimeError):
    """The whole fetch attempt failed (transport, status, payload or missing table)."""


def parse_difficulty(tier_text: str) -> Difficulty:
    tier = (tier_text or "").strip().lower()
    for d in _TIER_MATCH_ORDER:
        if d.value.lower() in tier:
            return d
    logger.warning("Unknown difficulty tier %r, defaulting to Easy", tier_text)
    return Difficulty.EASY


def parse_completion_rate(text: str) -> float:
    m = _COMPLETION_PATTERN.search(text or "")
    if not m:
        return 0.0
    try:
        return float(m.group(1))
    except ValueError:
        logger.warning("Failed to parse completion rate: %r", text)
        return 0.0


def _cell_text(cell: LexborNode) -> str:
    raw = cell.text(deep=True, separator=" ", strip=True) or ""
    return _WHITESPACE.sub(" ", raw).strip()


def parse_task_row(cells: list[str]) -> RemoteTask | None:
    """
    Build a record from one row's cell texts.

    Columns: monster, name, description, type, tier (+points), completion %.
    Returns None for rows that should be skipped.
    """
    if len(cells) < MIN_CELLS:
        return None

    monster, name, description, type_text, tier_text, comp_text = cells[:MIN_CELLS]
    if not name or not tier_text:
        return None

    return RemoteTask(
        name=name,
        monster=monster or extract_monster_name(name),
        difficulty=parse_difficulty(tier_text),
        category=TaskCategory.from_text(type_text),
        description=description,
        completion_rate=parse_completion_rate(comp_text),
    )


def parse_task_table(html: str) -> list[RemoteTask]:
    """Parse every wikitable row on the rendered page. Raises FetchError if there is no table."""
    tree = LexborHTMLParser(html or "")
    tables = tree.css("table.wikitable")
    if not tables:
        raise FetchError("Could not find wikitable in rendered page")

    records: list[RemoteTask] = []
    skipped = 0

    for table in tables:
        for row in table.css("tr"):
            cells = [_cell_text(c) for c in row.css("td")]
            if not cells:
                # header row (th only)
                continue
            try:
                record = parse_task_row(cells)
            except Exception as e:
                logger.warning("Failed to parse row: %s", e)
                record = None

            if record is None:
                skipped += 1
                logger.debug("Skipped row: %r", cells)
                continue
            records.append(record)

    logger.info("Parsed %d achievements from wiki (%d rows skipped)", len(records), skipped)
    return records


class WikiMetadataFetcher:
    """Fetches and parses the wiki's combat achievement task list."""

    def __init__(
        self,
        *,
        api_url: str,
        page_title: str,
        user_agent: str,
        timeout_seconds: float = 20.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._api_url = api_url
        self._page_title = page_title
        self._headers = {"User-Agent": user_agent}
        self._timeout = httpx.Timeout(timeout_seconds, connect=min(5.0, timeout_seconds))
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Any) -> WikiMetadataFetcher:
        return cls(
            api_url=settings.wiki_api_url,
            page_title=settings.wiki_page_title,
            user_agent=settings.user_agent,
            timeout_seconds=float(getattr(settings, "http_timeout_seconds", 20.0)),
        )

    def fetch_rendered_page(self) -> str:
        params = {
            "action": "parse",
            "page": self._page_title,
            "prop": "text",
            "format": "json",
            "formatversion": "2",
        }
        logger.info("Fetching combat achievements from wiki page %r", self._page_title)

        try:
            with httpx.Client(
                headers=self._headers,
                timeout=self._timeout,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                response = client.get(self._api_url, params=params)
        except httpx.HTTPError as e:
            raise FetchError(f"Wiki request failed: {e}") from e

        if not response.is_success:
            raise FetchError(f"Wiki returned HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise FetchError("Wiki response is not JSON") from e

        parse = payload.get("parse") if isinstance(payload, dict) else None
        text = parse.get("text") if isinstance(parse, dict) else None
        if isinstance(text, dict):
            # formatversion=1 shape: {"*": "<html>"}
            text = text.get("*")
        if not isinstance(text, str) or not text.strip():
            raise FetchError("Unexpected API response structure")
        return text

    def fetch_all(self) -> list[RemoteTask]:
        records = parse_task_table(self.fetch_rendered_page())
        if not records:
            raise FetchError("Wiki table contained no usable rows")
        return records
