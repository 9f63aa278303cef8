# src/taskodoro/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from ..core.clock import from_wire, to_iso


class TaskStatus(StrEnum):
    PENDING = "pending"
    DONE = "done"

    @classmethod
    def from_wire(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.PENDING
        try:
            return cls(raw)
        except ValueError:
            return cls.PENDING


def normalize_username(raw: str | None) -> str:
    """Usernames are compared and stored case-folded."""
    return (raw or "").strip().lower()


@dataclass(slots=True)
class Task:
    id: int
    text: str
    username: str
    status: TaskStatus
    created_at: float
    updated_at: float

    @property
    def is_done(self) -> bool:
        return self.status == TaskStatus.DONE

    def to_dict(self) -> dict[str, Any]:
        """Wire/snapshot shape (camelCase keys, ISO timestamps)."""
        return {
            "id": self.id,
            "text": self.text,
            "username": self.username,
            "status": self.status.value,
            "createdAt": to_iso(self.created_at),
            "updatedAt": to_iso(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        """
        Inverse of to_dict. Raises ValueError/TypeError/KeyError on records
        that cannot be a task (missing id, empty text, ...).
        """
        task_id = int(data["id"])
        text = str(data.get("text") or "").strip()
        username = normalize_username(data.get("username"))
        if task_id < 1 or not text or not username:
            raise ValueError(f"invalid task record id={data.get('id')!r}")
        created = from_wire(data.get("createdAt")) or 0.0
        updated = from_wire(data.get("updatedAt")) or created
        return cls(
            id=task_id,
            text=text,
            username=username,
            status=TaskStatus.from_wire(data.get("status")),
            created_at=created,
            updated_at=updated,
        )
