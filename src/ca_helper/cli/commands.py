# src/ca_helper/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.models import DIFFICULTY_ORDER, TargetGroup, Task
from ..core.state import AppState
from ..host.snapshot import StaticCompletionSource
from ..progress.manual import current_task
from ..routing.engine import (
    evaluated_tasks,
    find_target,
    get_points_breakdown,
    get_recommendations,
    get_tier_progress,
    reload_catalog,
    update_routing,
)
from ..routing.filters import is_group_content
from ..routing.options import option_names

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

MATCH_SAMPLE_DEFAULT = 20
SOLO_SAMPLE = 5


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /recommend, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----


def _task_marker(task: Task, state: AppState) -> str:
    if task.is_complete:
        return "[x]"
    if task.id in state.manual:
        return "[m]"
    return "[ ]"


def format_task(task: Task, state: AppState) -> str:
    rate = f", {task.completion_rate:.1f}%" if task.completion_rate > 0 else ""
    return f"{_task_marker(task, state)} #{task.id} {task.name} ({task.difficulty}{rate}) - {task.category}"


def format_group(position: int, group: TargetGroup, state: AppState) -> str:
    line = (
        f"{position}. {group.key}  {group.completed_count}/{group.total_count}"
        f" ({group.completion_percentage:.0f}%)"
    )
    if group.score >= 0:
        line += f"  score {group.score:.2f}"
    nxt = current_task(group, state.manual)
    if nxt is not None:
        line += f"  next: {nxt.name} [{nxt.difficulty}]"
    return line


def render_recommendations(state: AppState, limit: int | None = None) -> str:
    groups = get_recommendations(state, limit)
    header = "Recommended targets:"
    if not state.enrichment.is_loaded():
        header += " (wiki data not loaded; host data only)"
    if not groups:
        return header + "\n  Nothing to recommend (all filtered out or complete)."
    lines = [header]
    for i, g in enumerate(groups, start=1):
        lines.append("  " + format_group(i, g, state))
    return "\n".join(lines)


def _wiki_status(state: AppState) -> str:
    if state.enrichment.is_loaded():
        return "loaded"
    if state.enrichment.is_loading():
        return "loading..."
    return "not loaded"


# ---- commands ----


def cmd_help(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    return registry.build_help()


def cmd_recommend(
    state: AppState,
    args: list[str],
) -> str:
    limit: int | None = None
    if args:
        try:
            limit = max(0, int(args[0]))
        except ValueError:
            return "Usage: /recommend [count]"
    return render_recommendations(state, limit)


def cmd_status(
    state: AppState,
    args: list[str],
) -> str:
    progress = get_tier_progress(state)
    breakdown = get_points_breakdown(state)
    mode = "smart (low-hanging fruit)" if state.routing.use_smart_routing else "simple (easiest first)"

    lines = [
        "Status:",
        f"  Points: {progress.points}  Tier: {progress.current_tier}",
        f"  Next tier: {progress.next_tier} ({progress.points_to_next} points to go)",
        f"  Tasks: {progress.completed_count}/{progress.total_count} complete",
        f"  Manually marked: {len(state.manual)}",
        f"  Wiki data: {_wiki_status(state)}",
        f"  Routing: {mode}",
        "  Points by tier:",
    ]
    for tier in DIFFICULTY_ORDER:
        lines.append(f"    {tier}: {breakdown.get(tier, 0)}")
    return "\n".join(lines)


def cmd_boss(
    state: AppState,
    args: list[str],
) -> str:
    if not args:
        return "Usage: /boss <name>"
    name = " ".join(args)
    group = find_target(state, name)
    if group is None:
        return f"No tasks found for {name!r}."

    lines = [
        f"{group.key}: {group.completed_count}/{group.total_count} complete"
        f" ({group.completion_percentage:.0f}%)"
    ]
    nxt = current_task(group, state.manual)
    if nxt is not None:
        lines.append(f"  Current task: #{nxt.id} {nxt.name}")
    for t in group.tasks:
        lines.append("  " + format_task(t, state))
    return "\n".join(lines)


def cmd_done(
    state: AppState,
    args: list[str],
) -> str:
    """
    /done <task_id>  -> toggle the manual "done" mark on a task

    Display only: decoded completion, points and scoring are unaffected.
    """
    if not args:
        return "Usage: /done <task_id>"
    try:
        task_id = int(args[0])
    except ValueError:
        return "Task id must be a number."

    task = state.catalog.get(task_id)
    if task is None:
        return f"Unknown task id: {task_id}"

    marked = state.manual.toggle(task_id)
    if marked:
        return f"Marked #{task_id} {task.name} as done."
    return f"Unmarked #{task_id} {task.name}."


def cmd_config(
    state: AppState,
    args: list[str],
) -> str:
    """
    /config              -> show routing options
    /config <key> <val>  -> change one option (saved to the preference store)
    """
    if not args:
        lines = ["Routing options:"]
        for name, value in state.routing.as_strings().items():
            lines.append(f"  {name} = {value}")
        return "\n".join(lines)

    if len(args) < 2:
        return "Usage: /config <key> <value>. Keys: " + ", ".join(option_names())

    key = args[0].lower()
    raw = " ".join(args[1:])
    try:
        cfg = state.routing.with_value(key, raw)
    except ValueError as e:
        return f"Invalid option: {e}"

    update_routing(state, cfg)
    state.throttle.reset()
    reply = f"{key} = {cfg.as_strings()[key]}"
    if key == "auto_refresh_minutes":
        reply += " (takes effect on restart)"
    return reply


def cmd_reload(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    """Rebuild the catalog from the host and (re)load wiki data."""
    count = reload_catalog(state)
    state.throttle.reset()

    if emit:
        with contextlib.suppress(Exception):
            emit(f"[CATALOG] Reloaded {count} tasks. Loading wiki data...")

    fut = state.enrichment.load()
    if fut.done():
        ok = fut.result()
        return f"Catalog: {count} tasks. Wiki data: {'loaded' if ok else 'unavailable'}."
    return f"Catalog: {count} tasks. Wiki data is loading in the background."


def cmd_match(
    state: AppState,
    args: list[str],
) -> str:
    """/match [n] -> show how the first n host task names match wiki records."""
    n = MATCH_SAMPLE_DEFAULT
    if args:
        try:
            n = max(1, int(args[0]))
        except ValueError:
            return "Usage: /match [count]"

    index = state.enrichment.index()
    if index is None:
        return "Wiki data not loaded. Use /reload."

    matched = sum(1 for t in state.catalog if index.lookup(t.name) is not None)
    lines = [f"Wiki matches: {matched}/{len(state.catalog)} host tasks ({len(index)} wiki records)"]
    for t in list(state.catalog)[:n]:
        hit = index.lookup(t.name)
        if hit is None:
            lines.append(f"  MISS  #{t.id} {t.name!r}")
        else:
            lines.append(f"  OK    #{t.id} {t.name!r} -> {hit.monster} ({hit.category})")
    return "\n".join(lines)


def cmd_solo(
    state: AppState,
    args: list[str],
) -> str:
    """Show how many tasks the solo-only filter would hide."""
    tasks = evaluated_tasks(state)
    group_tasks = [t for t in tasks if is_group_content(t)]
    lines = [
        f"Solo filter: {'on' if state.routing.solo_content_only else 'off'}",
        f"  Group content: {len(group_tasks)} of {len(tasks)} tasks",
    ]
    for t in group_tasks[:SOLO_SAMPLE]:
        lines.append(f"  - #{t.id} {t.name} ({t.monster})")
    return "\n".join(lines)


def cmd_sync(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    """/sync [username] -> use completion data from the wiki's sync service."""
    username = " ".join(args).strip() or (getattr(state.settings, "default_username", None) or "")
    if not username:
        return "Usage: /sync <username>"
    if state.sync_client is None:
        return "Wiki Sync is not configured."

    if emit:
        with contextlib.suppress(Exception):
            emit(f"[SYNC] Fetching progress for {username}...")

    progress = state.sync_client.fetch_player_progress(username)
    if progress.completed_count == 0:
        return f"No Wiki Sync data for {username}."

    current = state.completion
    base = current.base if isinstance(current, StaticCompletionSource) else current
    with state.lock:
        state.completion = StaticCompletionSource(words=progress.to_completion_words(), base=base)
    state.throttle.reset()
    return f"Synced {progress.completed_count} completed tasks for {username}."


def cmd_clearcache(
    state: AppState,
    args: list[str],
) -> str:
    state.enrichment.clear_cache()
    return "Wiki cache cleared. Use /reload to fetch fresh data."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "recommend", cmd_recommend, help_text="Recommended targets: /recommend [count].", aliases=["r"]
)
registry.register("status", cmd_status, help_text="Points, tier progress and wiki data status.")
registry.register("boss", cmd_boss, help_text="All tasks for one target: /boss <name>.")
registry.register("done", cmd_done, help_text="Toggle a manual done mark: /done <task_id>.")
registry.register("config", cmd_config, help_text="Show or change routing options: /config [key value].")
registry.register("reload", cmd_reload, help_text="Reload the catalog and wiki data.")
registry.register("match", cmd_match, help_text="Wiki name matching diagnostics: /match [count].")
registry.register("solo", cmd_solo, help_text="Group-content filter diagnostics.")
registry.register("sync", cmd_sync, help_text="Use Wiki Sync progress: /sync <username>.")
registry.register("clearcache", cmd_clearcache, help_text="Delete the cached wiki data.")
