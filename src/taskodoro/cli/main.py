# src/taskodoro/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (restoring the last snapshot), then starts:
- HTTP + Socket.IO server with the pomodoro ticker in a background thread,
- console chat REPL in the main thread (optional).
"""

from __future__ import annotations

import logging
import signal
import threading

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from ..server.runner import start_server_in_background

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        state.core.save_now()
    except Exception:
        logger.exception("Failed to save final snapshot.")


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)
    server_runner = start_server_in_background(state)

    # Use an Event so main can wait without a busy while-loop.
    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()
        if settings.console_enabled:
            # unblock input() in the console loop
            raise KeyboardInterrupt

    try:
        signal.signal(signal.SIGTERM, _handle_signal)
        # With the console on, Ctrl+C must still raise KeyboardInterrupt inside input().
        if not settings.console_enabled:
            signal.signal(signal.SIGINT, _handle_signal)
    except (ValueError, OSError, AttributeError):
        # Not in the main thread, or SIGTERM unsupported on this platform.
        pass

    try:
        if settings.console_enabled:
            run_console_loop(state)
            stop_main.set()
        else:
            logger.info("Console disabled. Running server only. Press Ctrl+C to stop.")
            stop_main.wait()
    finally:
        if server_runner is not None:
            server_runner.stop()
            server_runner.join(timeout=10.0)

        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
