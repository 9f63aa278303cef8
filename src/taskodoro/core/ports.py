# src/taskodoro/core/ports.py

"""
Ports (interfaces) used by the core.

AppCore depends on Protocols instead of concrete implementations, so the
socket fan-out and the snapshot file stay swappable and tests can use fakes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from .effects import Event


@dataclass(slots=True)
class Snapshot:
    """Everything needed to restore the core after a restart."""

    tasks: list[dict[str, Any]] = field(default_factory=list)
    id_counter: int = 1
    pomodoro_state: dict[str, Any] | None = None
    # Monotonic per-process write order; not persisted.
    seq: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "tasks": self.tasks,
            "idCounter": self.id_counter,
            "pomodoroState": self.pomodoro_state,
        }


class EventSink(Protocol):
    """
    Real-time fan-out port.

    publish() must not block: implementations enqueue and deliver later.
    `to` addresses a single subscriber; None means everyone.
    """

    def publish(self, event: Event, to: str | None = None) -> None: ...


class SnapshotStore(Protocol):
    def save(self, snapshot: Snapshot) -> None: ...
    def load(self) -> Snapshot | None: ...


class NullEventSink:
    """Sink used when no real-time layer is attached (console-only runs)."""

    def publish(self, event: Event, to: str | None = None) -> None:
        return
