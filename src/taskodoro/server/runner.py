# src/taskodoro/server/runner.py

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

import uvicorn

from ..core.state import AppState
from .app import create_asgi_app

logger = logging.getLogger(__name__)


@dataclass
class ServerBackgroundRunner:
    thread: threading.Thread
    server: uvicorn.Server

    def stop(self) -> None:
        self.server.should_exit = True

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_server_in_background(state: AppState) -> ServerBackgroundRunner | None:
    """
    Start the HTTP + Socket.IO server (and with it the pomodoro ticker) in a
    background thread so the console REPL can run in the main thread.
    """
    settings = state.settings
    if not getattr(settings, "server_enabled", True):
        logger.info("Server disabled, not starting.")
        return None

    config = uvicorn.Config(
        create_asgi_app(state),
        host=settings.host,
        port=int(settings.port),
        log_config=None,
        lifespan="on",
    )
    server = uvicorn.Server(config)

    def runner() -> None:
        try:
            server.run()
        except Exception:
            logger.exception("Server thread crashed.")

    t = threading.Thread(target=runner, name="taskodoro-server", daemon=True)
    t.start()
    logger.info("Server starting on http://%s:%s (overlay at /)", settings.host, settings.port)
    return ServerBackgroundRunner(thread=t, server=server)
