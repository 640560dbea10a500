# src/ca_helper/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No network or filesystem access at import time (paths are only computed).
- Routing options here are defaults; the preference store overrides them at runtime.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_PREFIX = "CAHELPER"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


# Real environment wins over .env values.
load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    cache_path: Path
    preferences_db_path: Path
    host_snapshot_path: Path

    # ---- Wiki metadata ----
    cache_ttl_days: int
    wiki_api_url: str
    wiki_page_title: str
    wiki_sync_url: str
    user_agent: str
    http_timeout_seconds: float

    # ---- Routing defaults ----
    use_smart_routing: bool
    min_difficulty: str
    max_difficulty: str
    solo_content_only: bool
    hide_wilderness_content: bool
    auto_refresh_minutes: int
    refresh_cooldown_ms: int
    recommendation_limit: int

    # Optional player name for /sync without arguments.
    default_username: Optional[str] = None

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "ca-helper")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/ca_helper"))
        cache_path = _env_path(_k("CACHE_PATH"), data_dir / "ca-wiki-cache.json")
        preferences_db_path = _env_path(_k("PREFERENCES_DB_PATH"), data_dir / "preferences.sqlite3")
        host_snapshot_path = _env_path(_k("HOST_SNAPSHOT_PATH"), data_dir / "host_snapshot.json")

        cache_ttl_days = _env_int(_k("CACHE_TTL_DAYS"), 7)
        wiki_api_url = _env(_k("WIKI_API_URL"), "https://oldschool.runescape.wiki/api.php")
        wiki_page_title = _env(_k("WIKI_PAGE_TITLE"), "Combat Achievements/All tasks")
        wiki_sync_url = _env(_k("WIKI_SYNC_URL"), "https://sync.runescape.wiki/runelite/player")
        user_agent = _env(_k("USER_AGENT"), "ca-helper/0.1 (combat achievement router)")
        http_timeout_seconds = _env_float(_k("HTTP_TIMEOUT_SECONDS"), 20.0)

        use_smart_routing = _env_bool(_k("USE_SMART_ROUTING"), True)
        min_difficulty = _env(_k("MIN_DIFFICULTY"), "Easy")
        max_difficulty = _env(_k("MAX_DIFFICULTY"), "Grandmaster")
        solo_content_only = _env_bool(_k("SOLO_CONTENT_ONLY"), False)
        hide_wilderness_content = _env_bool(_k("HIDE_WILDERNESS_CONTENT"), False)
        auto_refresh_minutes = _env_int(_k("AUTO_REFRESH_MINUTES"), 0)
        refresh_cooldown_ms = _env_int(_k("REFRESH_COOLDOWN_MS"), 500)
        recommendation_limit = _env_int(_k("RECOMMENDATION_LIMIT"), 10)

        default_username = (_env(_k("USERNAME"), "") or "").strip() or None

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            cache_path=cache_path,
            preferences_db_path=preferences_db_path,
            host_snapshot_path=host_snapshot_path,
            cache_ttl_days=cache_ttl_days,
            wiki_api_url=wiki_api_url,
            wiki_page_title=wiki_page_title,
            wiki_sync_url=wiki_sync_url,
            user_agent=user_agent,
            http_timeout_seconds=http_timeout_seconds,
            use_smart_routing=use_smart_routing,
            min_difficulty=min_difficulty,
            max_difficulty=max_difficulty,
            solo_content_only=solo_content_only,
            hide_wilderness_content=hide_wilderness_content,
            auto_refresh_minutes=auto_refresh_minutes,
            refresh_cooldown_ms=refresh_cooldown_ms,
            recommendation_limit=recommendation_limit,
            default_username=default_username,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
