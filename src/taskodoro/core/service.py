# src/taskodoro/core/service.py

"""
AppCore: the single writer.

Every external call and every tick goes through _apply():
1) take the lock,
2) run the pure transition (TaskStore / PomodoroEngine -> Outcome),
3) hand events to the sink while still holding the lock (keeps per-entity
   order across threads; publish() only enqueues),
4) capture a snapshot if the outcome asks for one,
5) release the lock, then write the snapshot.

Broadcast and persistence failures are logged and swallowed; they never undo
or block the in-memory change.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any, TypeVar

from ..pomodoro.pomodoro_engine import PomodoroEngine
from ..pomodoro.pomodoro_models import WORK_MINUTES, PomodoroState
from ..tasks.task_models import Task
from ..tasks.task_store import TaskStore
from .effects import Event, Outcome
from .ports import EventSink, NullEventSink, Snapshot, SnapshotStore

logger = logging.getLogger(__name__)

TASKS_LOADED = "tasksLoaded"
POMODORO_STATE_LOADED = "pomodoroStateLoaded"

T = TypeVar("T")
R = TypeVar("R")


class AppCore:
    def __init__(
        self,
        *,
        task_store: TaskStore,
        pomodoro: PomodoroEngine,
        events: EventSink | None = None,
        snapshots: SnapshotStore | None = None,
    ) -> None:
        self.task_store = task_store
        self.pomodoro = pomodoro
        self._events: EventSink = events or NullEventSink()
        self._snapshots = snapshots
        self._lock = threading.RLock()
        self._seq = 0

    def attach_events(self, sink: EventSink) -> None:
        with self._lock:
            self._events = sink

    # ---- plumbing ----

    def _apply(self, op: Callable[[], Outcome[T]], view: Callable[[T], R]) -> R:
        with self._lock:
            outcome = op()
            result = view(outcome.value)
            self._publish(outcome.events)
            snap = self._capture() if outcome.persist else None
        if snap is not None:
            self._persist(snap)
        return result

    def _publish(self, events: list[Event], to: str | None = None) -> None:
        for event in events:
            try:
                self._events.publish(event, to=to)
            except Exception:
                logger.exception("Failed to publish event %s", event.name)

    def _capture(self) -> Snapshot:
        tasks, counter = self.task_store.to_snapshot()
        self._seq += 1
        return Snapshot(
            tasks=tasks,
            id_counter=counter,
            pomodoro_state=self.pomodoro.to_snapshot(),
            seq=self._seq,
        )

    def _persist(self, snap: Snapshot) -> None:
        if self._snapshots is None:
            return
        try:
            self._snapshots.save(snap)
        except Exception:
            logger.exception("Failed to save snapshot")

    # ---- lifecycle ----

    def restore(self, snapshot: Snapshot | None) -> None:
        """Load a snapshot; None (absent/corrupt) keeps the defaults."""
        if snapshot is None:
            return
        tasks: list[Task] = []
        for raw in snapshot.tasks:
            try:
                tasks.append(Task.from_dict(raw))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping invalid task record in snapshot: %r", raw)
        with self._lock:
            self.task_store.restore(tasks, snapshot.id_counter)
            if snapshot.pomodoro_state is not None:
                self.pomodoro.restore(PomodoroState.from_dict(snapshot.pomodoro_state))
        logger.info("Restored %d tasks, next id=%d", len(tasks), self.task_store.next_id)

    def snapshot(self) -> Snapshot:
        with self._lock:
            return self._capture()

    def save_now(self) -> None:
        self._persist(self.snapshot())

    def initial_events(self) -> list[Event]:
        """Full state for a new subscriber (not deltas)."""
        with self._lock:
            return [
                Event(TASKS_LOADED, [t.to_dict() for t in self.task_store.list_tasks()]),
                Event(POMODORO_STATE_LOADED, self.pomodoro.to_snapshot()),
            ]

    def send_initial_state(self, to: str) -> None:
        """
        Queue the full state for one subscriber.

        Done under the lock so nothing can be published between capturing the
        state and enqueueing it.
        """
        with self._lock:
            self._publish(self.initial_events(), to=to)

    # ---- tasks ----

    def list_tasks(self) -> list[dict[str, Any]]:
        with self._lock:
            return [t.to_dict() for t in self.task_store.list_tasks()]

    def tasks_for_user(self, username: str | None) -> list[dict[str, Any]]:
        with self._lock:
            return [t.to_dict() for t in self.task_store.tasks_for_user(username)]

    def create_task(self, text: str | None, username: str | None) -> dict[str, Any]:
        return self._apply(lambda: self.task_store.create(text, username), Task.to_dict)

    def update_task(self, task_id: int, text: str | None, username: str | None) -> dict[str, Any]:
        return self._apply(lambda: self.task_store.update(task_id, text, username), Task.to_dict)

    def complete_task(self, task_id: int, username: str | None) -> dict[str, Any]:
        return self._apply(lambda: self.task_store.complete(task_id, username), Task.to_dict)

    def delete_task(self, task_id: int, username: str | None) -> dict[str, Any]:
        return self._apply(lambda: self.task_store.delete(task_id, username), Task.to_dict)

    def clear_completed_tasks(self) -> list[dict[str, Any]]:
        return self._apply(self.task_store.clear_completed, lambda ts: [t.to_dict() for t in ts])

    # ---- pomodoro ----

    def start_pomodoro(self, username: str | None, duration_minutes: int = WORK_MINUTES) -> dict[str, Any]:
        return self._apply(lambda: self.pomodoro.start(username, duration_minutes), _same)

    def pause_pomodoro(self, username: str | None) -> dict[str, Any]:
        return self._apply(lambda: self.pomodoro.pause(username), _same)

    def resume_pomodoro(self, username: str | None) -> dict[str, Any]:
        return self._apply(lambda: self.pomodoro.resume(username), _same)

    def reset_pomodoro(self, username: str | None) -> dict[str, Any]:
        return self._apply(lambda: self.pomodoro.reset(username), _same)

    def get_pomodoro_status(self) -> dict[str, Any]:
        with self._lock:
            return self.pomodoro.status().to_dict()

    def tick(self) -> dict[str, Any] | None:
        return self._apply(self.pomodoro.tick, _same)


def _same(value: T) -> T:
    return value
