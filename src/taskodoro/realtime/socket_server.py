# src/taskodoro/realtime/socket_server.py

from __future__ import annotations

import logging
from typing import Any

import socketio

from ..core.service import AppCore

logger = logging.getLogger(__name__)


def create_socket_server(core: AppCore, *, cors_origins: list[str] | str = "*") -> socketio.AsyncServer:
    """
    Socket.IO server for overlay clients.

    On connect a client is sent tasksLoaded + pomodoroStateLoaded through the
    same ordered queue as every other event.
    """
    sio = socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins=cors_origins,
        logger=False,
        engineio_logger=False,
    )

    async def connect(sid: str, environ: dict[str, Any], auth: Any = None) -> None:
        logger.info("Overlay client connected sid=%s", sid)
        core.send_initial_state(sid)

    async def disconnect(sid: str, *args: Any) -> None:
        logger.info("Overlay client disconnected sid=%s", sid)

    sio.on("connect", connect)
    sio.on("disconnect", disconnect)
    return sio
