# tests/test_snapshot_store.py

from __future__ import annotations

import json
from pathlib import Path

from taskodoro.cli.bootstrap import create_initial_state
from taskodoro.core.ports import Snapshot
from taskodoro.storage.snapshot_store import JsonSnapshotStore


def test_save_then_load(tmp_path: Path) -> None:
    store = JsonSnapshotStore(tmp_path / "nested" / "tasks.json")
    store.save(
        Snapshot(
            tasks=[{"id": 1, "text": "a", "username": "u", "status": "pending"}],
            id_counter=2,
            pomodoro_state={"isActive": False, "timeLeft": 1500, "mode": "work", "session": 1},
            seq=1,
        )
    )

    raw = json.loads(store.path.read_text("utf-8"))
    assert set(raw) == {"tasks", "idCounter", "pomodoroState"}
    assert not store.path.with_suffix(".json.tmp").exists()

    loaded = store.load()
    assert loaded is not None
    assert loaded.id_counter == 2
    assert loaded.tasks[0]["text"] == "a"
    assert loaded.pomodoro_state["timeLeft"] == 1500


def test_stale_write_is_skipped(tmp_path: Path) -> None:
    store = JsonSnapshotStore(tmp_path / "tasks.json")
    store.save(Snapshot(id_counter=5, seq=5))
    store.save(Snapshot(id_counter=3, seq=3))

    assert store.load().id_counter == 5


def test_missing_file_loads_none(tmp_path: Path) -> None:
    assert JsonSnapshotStore(tmp_path / "nope.json").load() is None


def test_corrupt_file_loads_none(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text("{not json", "utf-8")
    assert JsonSnapshotStore(path).load() is None

    path.write_text("[1, 2, 3]", "utf-8")
    assert JsonSnapshotStore(path).load() is None


def test_legacy_keys_are_accepted(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(
        json.dumps(
            {
                "tasks": [{"id": 4, "text": "old", "username": "u", "status": "done"}, "junk"],
                "counter": 5,
                "pomodoro": {"isActive": True, "timeLeft": 77, "mode": "work", "session": 2,
                             "startTime": 1700000000000, "autoBreaks": True},
            }
        ),
        "utf-8",
    )
    snap = JsonSnapshotStore(path).load()
    assert snap.id_counter == 5
    assert len(snap.tasks) == 1
    assert snap.pomodoro_state["timeLeft"] == 77


def test_bootstrap_restores_previous_run(settings) -> None:
    first = create_initial_state(settings=settings)
    first.core.create_task("persist me", "Amy")
    first.core.start_pomodoro("amy", 5)

    second = create_initial_state(settings=settings)
    tasks = second.core.list_tasks()
    assert [(t["id"], t["text"]) for t in tasks] == [(1, "persist me")]
    assert second.core.get_pomodoro_status()["timeLeft"] == 300
    assert second.core.create_task("next", "amy")["id"] == 2


def test_bootstrap_with_corrupt_snapshot_uses_defaults(settings) -> None:
    settings.snapshot_path.write_text("garbage", "utf-8")
    state = create_initial_state(settings=settings)
    assert state.core.list_tasks() == []
    status = state.core.get_pomodoro_status()
    assert (status["isActive"], status["timeLeft"], status["mode"], status["session"]) == (False, 1500, "work", 1)
