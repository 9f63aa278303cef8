# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskodoro.core.service import AppCore
from taskodoro.core.state import AppState
from taskodoro.pomodoro.pomodoro_engine import PomodoroEngine
from taskodoro.tasks.task_store import TaskStore

from .fakes import FakeClock, MemorySnapshotStore, RecordingSink


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the server.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskodoro-test",
        data_dir=tmp_path,
        snapshot_path=tmp_path / "tasks.json",
        cors_origins=["*"],
        tick_interval_seconds=1.0,
        console_user="streamer",
        moderators=["streamer", "mod"],
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture()
def snapshots() -> MemorySnapshotStore:
    return MemorySnapshotStore()


@pytest.fixture()
def core(clock: FakeClock, sink: RecordingSink, snapshots: MemorySnapshotStore) -> AppCore:
    """AppCore wired with deterministic fakes."""
    return AppCore(
        task_store=TaskStore(clock=clock),
        pomodoro=PomodoroEngine(clock=clock),
        events=sink,
        snapshots=snapshots,
    )


@pytest.fixture()
def state(settings: SimpleNamespace, core: AppCore) -> AppState:
    return AppState(settings=settings, core=core)
