# src/taskodoro/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from ..core.clock import Clock, system_clock
from ..core.effects import Event, Outcome
from ..errors import Forbidden, NotFound, ValidationError
from .task_models import Task, TaskStatus, normalize_username

logger = logging.getLogger(__name__)

TASK_ADDED = "taskAdded"
TASK_UPDATED = "taskUpdated"
TASK_COMPLETED = "taskCompleted"
TASK_DELETED = "taskDeleted"
COMPLETED_TASKS_CLEARED = "completedTasksCleared"


class TaskStore:
    """
    In-memory task store.

    Tasks live in a dict keyed by id; dict order is insertion order, which is
    the order list_tasks() returns. Ids come from a monotonic counter that is
    never rewound, so a deleted id is never handed out again.

    Not thread-safe on its own: AppCore serializes all calls.
    Mutations return an Outcome; the store itself never broadcasts or writes.
    """

    def __init__(self, *, clock: Clock = system_clock) -> None:
        self._clock = clock
        self._tasks: dict[int, Task] = {}
        self._next_id = 1

    # ---- low-level helpers ----

    @property
    def next_id(self) -> int:
        return self._next_id

    def _get_owned(self, task_id: int, username: str | None) -> Task:
        task = self._tasks.get(int(task_id))
        if task is None:
            raise NotFound(f"Task {task_id} not found")
        user = normalize_username(username)
        if not user:
            raise ValidationError("Username is required")
        if task.username != user:
            raise Forbidden(f"Task {task_id} belongs to another user")
        return task

    # ---- queries ----

    def list_tasks(self) -> list[Task]:
        return list(self._tasks.values())

    def get(self, task_id: int) -> Task | None:
        return self._tasks.get(int(task_id))

    def tasks_for_user(self, username: str | None) -> list[Task]:
        user = normalize_username(username)
        if not user:
            return []
        return [t for t in self._tasks.values() if t.username == user]

    # ---- mutations ----

    def create(self, text: str | None, username: str | None) -> Outcome[Task]:
        clean_text = (text or "").strip()
        user = normalize_username(username)
        if not clean_text or not user:
            raise ValidationError("Text and username are required")

        now = self._clock()
        task = Task(
            id=self._next_id,
            text=clean_text,
            username=user,
            status=TaskStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        self._next_id += 1
        self._tasks[task.id] = task
        logger.debug("Task added id=%s user=%s", task.id, user)
        return Outcome.mutation(task, Event(TASK_ADDED, task.to_dict()))

    def update(self, task_id: int, text: str | None, username: str | None) -> Outcome[Task]:
        task = self._get_owned(task_id, username)

        if text:
            clean_text = text.strip()
            if not clean_text:
                raise ValidationError("Task text cannot be blank")
            task.text = clean_text
            task.updated_at = self._clock()

        logger.debug("Task updated id=%s", task.id)
        return Outcome.mutation(task, Event(TASK_UPDATED, task.to_dict()))

    def complete(self, task_id: int, username: str | None) -> Outcome[Task]:
        task = self._get_owned(task_id, username)
        task.status = TaskStatus.DONE
        task.updated_at = self._clock()
        logger.debug("Task done id=%s", task.id)
        return Outcome.mutation(task, Event(TASK_COMPLETED, task.to_dict()))

    def delete(self, task_id: int, username: str | None) -> Outcome[Task]:
        task = self._get_owned(task_id, username)
        del self._tasks[task.id]
        logger.debug("Task deleted id=%s", task.id)
        return Outcome.mutation(task, Event(TASK_DELETED, task.to_dict()))

    def clear_completed(self) -> Outcome[list[Task]]:
        removed = [t for t in self._tasks.values() if t.is_done]
        for t in removed:
            del self._tasks[t.id]
        logger.debug("Cleared %d completed tasks", len(removed))
        return Outcome.mutation(
            removed,
            Event(COMPLETED_TASKS_CLEARED, [t.to_dict() for t in removed]),
        )

    # ---- snapshot ----

    def to_snapshot(self) -> tuple[list[dict[str, Any]], int]:
        return [t.to_dict() for t in self._tasks.values()], self._next_id

    def restore(self, tasks: Iterable[Task], id_counter: int) -> None:
        """
        Replace contents with restored tasks.

        The counter is raised past the highest restored id so a stale counter
        can never cause id reuse.
        """
        self._tasks = {}
        for t in tasks:
            self._tasks[t.id] = t
        highest = max(self._tasks, default=0)
        self._next_id = max(int(id_counter or 1), highest + 1, 1)
