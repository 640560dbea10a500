# src/ca_helper/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, kicks off the wiki data load, then runs:
- console REPL in the main thread,
- auto-refresh loop in a background thread (optional).
"""

from __future__ import annotations

import logging
import signal

from ..cli.bootstrap import create_initial_state
from ..cli.commands import render_recommendations
from ..config import get_settings
from ..connectors.console_connector import emit, run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..routing.engine import refresh_throttled
from ..routing.refresh import AutoRefreshRunner, start_auto_refresh_in_background

logger = logging.getLogger(__name__)

SHUTDOWN_JOIN_SECONDS = 5.0


def _shutdown(state: AppState, unsubscribe, runner: AutoRefreshRunner | None) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    if runner is not None:
        runner.stop()
        runner.join(timeout=SHUTDOWN_JOIN_SECONDS)

    try:
        unsubscribe()
        state.enrichment.cancel()
        state.enrichment.join(timeout=SHUTDOWN_JOIN_SECONDS)
    except Exception:
        logger.debug("Enrichment shutdown failed.", exc_info=True)

    try:
        state.preferences.close()
    except Exception:
        logger.debug("Preference store close failed.", exc_info=True)


def main() -> None:
    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=getattr(settings, "data_dir", ".local/ca_helper"), console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "ca-helper"))

    # IMPORTANT: reuse same settings object
    state = create_initial_state(settings=settings)

    def show_recommendations() -> None:
        emit(render_recommendations(state))

    def on_wiki_data() -> None:
        emit("[WIKI] Wiki data ready.")
        refresh_throttled(state, show_recommendations)

    unsubscribe = state.enrichment.subscribe(on_wiki_data)
    state.enrichment.load()

    runner = start_auto_refresh_in_background(
        lambda: refresh_throttled(state, show_recommendations),
        interval_minutes=state.routing.auto_refresh_minutes,
    )

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        raise KeyboardInterrupt

    try:
        signal.signal(signal.SIGTERM, _handle_signal)
    except (ValueError, OSError, AttributeError):
        # Some platforms may not support SIGTERM.
        pass

    try:
        run_console_loop(state)
    finally:
        _shutdown(state, unsubscribe, runner)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
