# src/ca_helper/catalog/names.py

from __future__ import annotations

import re

_NON_KEY_CHARS = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")

# Checked in order, first hit wins ("Kill the " must precede "Kill ").
ACTION_PREFIXES: tuple[str, ...] = (
    "Kill the ",
    "Kill ",
    "Defeat the ",
    "Defeat ",
    "Complete the ",
    "Complete ",
    "Finish the ",
    "Finish ",
    "Win ",
    "Successfully ",
    "Beat the ",
    "Beat ",
)

# Each is tried in turn against the already-trimmed text (case-insensitive).
QUALIFIER_SUFFIXES: tuple[str, ...] = (
    " in a solo raid",
    " solo raid",
    " raid",
    " in a private instance",
    " without taking damage",
    " without leaving",
    " speedrun",
    " challenge",
)

UNKNOWN_MONSTER = "Unknown"


def normalize_task_name(name: str | None) -> str:
    """
    Join key between the host catalog and wiki rows.

    Lower-case, keep only [a-z0-9] and whitespace, collapse whitespace, trim.
    """
    if not name:
        return ""
    key = _NON_KEY_CHARS.sub("", name.lower())
    return _WHITESPACE.sub(" ", key).strip()


def extract_monster_name(task_name: str | None) -> str:
    """
    Best-effort target name when no wiki row matched.

    "Defeat the Chaos Fanatic in a solo raid" -> "Chaos Fanatic".
    Falls back to the full task name when stripping leaves nothing.
    """
    if not task_name:
        return UNKNOWN_MONSTER

    cleaned = task_name
    for prefix in ACTION_PREFIXES:
        if cleaned.startswith(prefix):
            cleaned = cleaned[len(prefix):]
            break

    for suffix in QUALIFIER_SUFFIXES:
        if cleaned.lower().endswith(suffix):
            cleaned = cleaned[: len(cleaned) - len(suffix)]

    cleaned = cleaned.strip()
    if not cleaned:
        return task_name
    return cleaned
