# src/taskodoro/core/effects.py

"""
Effects returned by state transitions.

Stores and the pomodoro engine never talk to sockets or disk. Each operation
returns an Outcome: the value for the caller, the events to broadcast, and
whether a snapshot should be written. AppCore performs the I/O afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class Event:
    name: str
    payload: Any


@dataclass(slots=True)
class Outcome(Generic[T]):
    value: T
    events: list[Event] = field(default_factory=list)
    persist: bool = False

    @classmethod
    def mutation(cls, value: T, *events: Event) -> Outcome[T]:
        """A state change that must be broadcast and snapshotted."""
        return cls(value=value, events=list(events), persist=True)
