# src/taskodoro/server/app.py

"""
HTTP API + overlay page. Thin routing over AppCore; the chat bot and the
overlay buttons call these endpoints.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from typing import Any

import socketio
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel

from ..core.state import AppState
from ..errors import CoreError, Forbidden, InvalidState, NotFound, ValidationError
from ..pomodoro.pomodoro_models import WORK_MINUTES
from ..pomodoro.pomodoro_ticker import run_pomodoro_ticker
from ..realtime.broadcaster import SocketBroadcaster
from ..realtime.socket_server import create_socket_server
from .overlay_page import OVERLAY_HTML

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: dict[type[CoreError], int] = {
    ValidationError: 400,
    Forbidden: 403,
    NotFound: 404,
    InvalidState: 409,
}


class TaskCreateBody(BaseModel):
    text: str | None = None
    username: str | None = None


class TaskUpdateBody(BaseModel):
    text: str | None = None
    username: str | None = None


class UserBody(BaseModel):
    username: str | None = None


class PomodoroStartBody(BaseModel):
    username: str | None = None
    duration: int = WORK_MINUTES


def _status_for(exc: CoreError) -> int:
    for cls in type(exc).__mro__:
        if cls in _STATUS_BY_ERROR:
            return _STATUS_BY_ERROR[cls]
    return 400


def create_app(
    state: AppState,
    *,
    broadcaster: SocketBroadcaster | None = None,
    run_ticker: bool = True,
) -> FastAPI:
    core = state.core
    settings = state.settings
    tick_interval = float(getattr(settings, "tick_interval_seconds", 1.0))

    @contextlib.asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        if broadcaster is not None:
            await broadcaster.start()
        ticker: asyncio.Task[None] | None = None
        if run_ticker:
            ticker = asyncio.create_task(
                run_pomodoro_ticker(core, interval_seconds=tick_interval), name="pomodoro-ticker"
            )
        try:
            yield
        finally:
            if ticker is not None:
                ticker.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await ticker
            if broadcaster is not None:
                await broadcaster.stop()

    app = FastAPI(
        title=str(getattr(settings, "app_name", "taskodoro")),
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(getattr(settings, "cors_origins", ["*"])),
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    @app.exception_handler(CoreError)
    async def core_error_handler(request: Request, exc: CoreError) -> JSONResponse:
        status = _status_for(exc)
        logger.info("API %s %s -> %d: %s", request.method, request.url.path, status, exc.message)
        return JSONResponse({"error": exc.message}, status_code=status)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # wrong body types answer 400 with the usual {"error": ...} shape
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"Invalid {field}: {first.get('msg', 'bad value')}" if field else "Invalid request"
        logger.info("API %s %s -> 400: %s", request.method, request.url.path, message)
        return JSONResponse({"error": message}, status_code=400)

    # ---- tasks ----

    @app.get("/api/tasks")
    def list_tasks() -> list[dict[str, Any]]:
        return core.list_tasks()

    @app.post("/api/tasks")
    def create_task(body: TaskCreateBody) -> dict[str, Any]:
        return core.create_task(body.text, body.username)

    # Must be registered before /api/tasks/{task_id}.
    @app.delete("/api/tasks/completed")
    def clear_completed() -> dict[str, Any]:
        removed = core.clear_completed_tasks()
        return {"message": f"Cleared {len(removed)} completed tasks", "tasks": removed}

    @app.put("/api/tasks/{task_id}")
    def update_task(task_id: int, body: TaskUpdateBody) -> dict[str, Any]:
        return core.update_task(task_id, body.text, body.username)

    @app.put("/api/tasks/{task_id}/done")
    def complete_task(task_id: int, body: UserBody) -> dict[str, Any]:
        return core.complete_task(task_id, body.username)

    @app.delete("/api/tasks/{task_id}")
    def delete_task(task_id: int, body: UserBody | None = None) -> dict[str, Any]:
        task = core.delete_task(task_id, body.username if body else None)
        return {"message": "Task deleted", "task": task}

    # ---- pomodoro ----

    @app.post("/api/pomodoro/start")
    def start_pomodoro(body: PomodoroStartBody) -> dict[str, Any]:
        pomo = core.start_pomodoro(body.username, body.duration)
        return {"message": f"Pomodoro started for {body.duration} minutes", "pomodoro": pomo}

    @app.post("/api/pomodoro/pause")
    def pause_pomodoro(body: UserBody) -> dict[str, Any]:
        return {"message": "Pomodoro paused", "pomodoro": core.pause_pomodoro(body.username)}

    @app.post("/api/pomodoro/resume")
    def resume_pomodoro(body: UserBody) -> dict[str, Any]:
        return {"message": "Pomodoro resumed", "pomodoro": core.resume_pomodoro(body.username)}

    @app.post("/api/pomodoro/reset")
    def reset_pomodoro(body: UserBody) -> dict[str, Any]:
        return {"message": "Pomodoro reset", "pomodoro": core.reset_pomodoro(body.username)}

    @app.get("/api/pomodoro/status")
    def pomodoro_status() -> dict[str, Any]:
        return core.get_pomodoro_status()

    # ---- overlay ----

    @app.get("/", response_class=HTMLResponse)
    def overlay_page() -> HTMLResponse:
        """URL for the OBS browser source."""
        return HTMLResponse(OVERLAY_HTML)

    return app


def create_asgi_app(state: AppState) -> Any:
    """FastAPI app wrapped with the Socket.IO endpoint (/socket.io)."""
    cors = list(getattr(state.settings, "cors_origins", ["*"]))
    sio = create_socket_server(state.core, cors_origins="*" if cors == ["*"] else cors)
    broadcaster = SocketBroadcaster(sio)
    state.core.attach_events(broadcaster)
    api = create_app(state, broadcaster=broadcaster)
    return socketio.ASGIApp(sio, other_asgi_app=api)
