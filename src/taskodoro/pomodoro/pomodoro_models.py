# src/taskodoro/pomodoro/pomodoro_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Final

from ..core.clock import from_wire, to_iso

WORK_MINUTES: Final = 25
SHORT_BREAK_MINUTES: Final = 10
LONG_BREAK_MINUTES: Final = 15
SESSIONS_PER_LONG_BREAK: Final = 4
# pomodoroTick goes out whenever timeLeft is a multiple of this
TICK_BROADCAST_EVERY: Final = 10

WORK_SECONDS: Final = WORK_MINUTES * 60


class PomodoroMode(StrEnum):
    WORK = "work"
    BREAK = "break"


class BreakType(StrEnum):
    SHORT = "short"
    LONG = "long"

    @classmethod
    def for_session(cls, session: int) -> BreakType:
        return cls.LONG if session % SESSIONS_PER_LONG_BREAK == 0 else cls.SHORT

    @property
    def minutes(self) -> int:
        return LONG_BREAK_MINUTES if self is BreakType.LONG else SHORT_BREAK_MINUTES


@dataclass(slots=True)
class PomodoroState:
    is_active: bool = False
    time_left: int = WORK_SECONDS
    mode: PomodoroMode = PomodoroMode.WORK
    session: int = 1
    start_time: float | None = None
    initiated_by: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "isActive": self.is_active,
            "timeLeft": self.time_left,
            "mode": self.mode.value,
            "session": self.session,
            "startTime": to_iso(self.start_time),
            "initiatedBy": self.initiated_by,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PomodoroState:
        """Lenient parse: unknown or out-of-range fields fall back to defaults."""
        default = cls()
        try:
            mode = PomodoroMode(data.get("mode") or default.mode)
        except ValueError:
            mode = default.mode
        try:
            time_left = max(0, int(data.get("timeLeft", default.time_left)))
        except (TypeError, ValueError):
            time_left = default.time_left
        try:
            session = max(1, int(data.get("session", default.session)))
        except (TypeError, ValueError):
            session = default.session
        initiated_by = data.get("initiatedBy")
        return cls(
            is_active=bool(data.get("isActive", False)),
            time_left=time_left,
            mode=mode,
            session=session,
            start_time=from_wire(data.get("startTime")),
            initiated_by=str(initiated_by) if initiated_by else None,
        )


@dataclass(slots=True, frozen=True)
class PomodoroStatus:
    """Read-only view returned by status queries."""

    time_left: int
    is_active: bool
    mode: PomodoroMode
    session: int
    initiated_by: str | None
    current_session: int
    next_break_type: BreakType

    @classmethod
    def of(cls, state: PomodoroState) -> PomodoroStatus:
        # session only advances when a break ends, so during a break the
        # work session that just finished is session - 1.
        current = state.session if state.mode == PomodoroMode.WORK else state.session - 1
        return cls(
            time_left=state.time_left,
            is_active=state.is_active,
            mode=state.mode,
            session=state.session,
            initiated_by=state.initiated_by,
            current_session=current,
            next_break_type=BreakType.for_session(current),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "timeLeft": self.time_left,
            "isActive": self.is_active,
            "mode": self.mode.value,
            "session": self.session,
            "initiatedBy": self.initiated_by,
            "currentSession": self.current_session,
            "nextBreakType": self.next_break_type.value,
        }
