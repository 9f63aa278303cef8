# src/taskodoro/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires TaskStore / PomodoroEngine / snapshot store into AppCore,
- restores the last snapshot (defaults when absent or corrupt).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.service import AppCore
from ..core.state import AppState
from ..pomodoro.pomodoro_engine import PomodoroEngine
from ..storage.snapshot_store import JsonSnapshotStore
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.snapshot_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    snapshots = JsonSnapshotStore(settings.snapshot_path)
    core = AppCore(
        task_store=TaskStore(),
        pomodoro=PomodoroEngine(),
        snapshots=snapshots,
    )
    core.restore(snapshots.load())
    return AppState(settings=settings, core=core)
