# tests/test_socket_server.py

from __future__ import annotations

import pytest
import socketio

from taskodoro.core.service import AppCore
from taskodoro.realtime.socket_server import create_socket_server
from taskodoro.server.app import create_asgi_app

from .fakes import RecordingSink


@pytest.mark.asyncio
async def test_connect_handler_sends_initial_state(core: AppCore, sink: RecordingSink) -> None:
    core.create_task("hello", "u")
    sink.clear()

    sio = create_socket_server(core)
    connect = sio.handlers["/"]["connect"]
    await connect("sid-42", {}, None)

    assert sink.names == ["tasksLoaded", "pomodoroStateLoaded"]
    assert {p.to for p in sink.published} == {"sid-42"}


def test_asgi_app_wraps_fastapi(state) -> None:
    app = create_asgi_app(state)
    assert isinstance(app, socketio.ASGIApp)
