# src/taskodoro/storage/snapshot_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
import threading
from pathlib import Path
from typing import Any

from ..core.ports import Snapshot

logger = logging.getLogger(__name__)


class JsonSnapshotStore:
    """
    JSON file snapshot: {"tasks": [...], "idCounter": n, "pomodoroState": {...}}.

    Writes go to a temp file and are moved into place with os.replace, so a
    crash mid-write leaves the previous snapshot intact. Concurrent writers
    are ordered by Snapshot.seq: a write older than the last completed one is
    dropped (last write wins).
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()
        self._last_seq = -1

    @property
    def path(self) -> Path:
        return self._path

    def save(self, snapshot: Snapshot) -> None:
        with self._lock:
            if snapshot.seq and snapshot.seq < self._last_seq:
                logger.debug("Skipping stale snapshot seq=%s (last=%s)", snapshot.seq, self._last_seq)
                return
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp.write_text(json.dumps(snapshot.to_dict(), ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
            with contextlib.suppress(Exception):
                os.chmod(self._path, 0o600)
            self._last_seq = max(self._last_seq, snapshot.seq)
        logger.debug("Saved snapshot: %d tasks to %s", len(snapshot.tasks), self._path)

    def load(self) -> Snapshot | None:
        if not self._path.exists():
            logger.info("No snapshot at %s, starting fresh", self._path)
            return None
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.exception("Failed to read snapshot from %s", self._path)
            return None
        if not isinstance(data, dict):
            logger.warning("Snapshot %s is not an object; ignoring", self._path)
            return None

        tasks_raw: Any = data.get("tasks")
        tasks = [t for t in tasks_raw if isinstance(t, dict)] if isinstance(tasks_raw, list) else []

        # Older files used "counter"/"pomodoro".
        counter_raw = data.get("idCounter", data.get("counter", 1))
        try:
            id_counter = max(1, int(counter_raw))
        except (TypeError, ValueError):
            id_counter = 1

        pomo = data.get("pomodoroState", data.get("pomodoro"))
        snap = Snapshot(
            tasks=tasks,
            id_counter=id_counter,
            pomodoro_state=pomo if isinstance(pomo, dict) else None,
        )
        logger.info("Loaded snapshot: %d tasks from %s", len(snap.tasks), self._path)
        return snap
