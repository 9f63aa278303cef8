# src/taskodoro/pomodoro/pomodoro_engine.py

"""
Pomodoro state machine.

Two orthogonal axes: mode (work/break) and is_active. External operations
(start/pause/resume/reset) and the periodic tick are the only writers.

Completion rules (applied by tick when time_left hits 0):
- work -> break: break auto-starts (stays active), length depends on session
- break -> work: session += 1, timer stops and waits for an explicit start
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from ..core.clock import Clock, system_clock
from ..core.effects import Event, Outcome
from ..errors import InvalidState, ValidationError
from .pomodoro_models import (
    TICK_BROADCAST_EVERY,
    WORK_MINUTES,
    WORK_SECONDS,
    BreakType,
    PomodoroMode,
    PomodoroState,
    PomodoroStatus,
)

logger = logging.getLogger(__name__)

POMODORO_STARTED = "pomodoroStarted"
POMODORO_PAUSED = "pomodoroPaused"
POMODORO_RESUMED = "pomodoroResumed"
POMODORO_RESET = "pomodoroReset"
POMODORO_TICK = "pomodoroTick"
POMODORO_WORK_COMPLETED = "pomodoroWorkCompleted"
POMODORO_BREAK_COMPLETED = "pomodoroBreakCompleted"


def work_completed_message(session: int, break_type: BreakType) -> str:
    if break_type is BreakType.LONG:
        return (
            f"🎉 Work session {session} completed! "
            f"Time for a {break_type.minutes}-minute long break! 🛋️"
        )
    return f"🎉 Work session {session} completed! Time for a {break_type.minutes}-minute break! ☕"


def break_completed_message(session: int) -> str:
    return f"✨ Break over! Ready for work session {session}? Use !pomodoro to start! 💪"


class PomodoroEngine:
    """
    Process-wide Pomodoro timer.

    Not thread-safe on its own: AppCore serializes every call, including tick().
    """

    def __init__(self, *, clock: Clock = system_clock) -> None:
        self._clock = clock
        self._state = PomodoroState()

    @property
    def state(self) -> PomodoroState:
        """A copy; mutate through the engine only."""
        return replace(self._state)

    def _mutation(self, name: str) -> Outcome[dict[str, Any]]:
        data = self._state.to_dict()
        return Outcome.mutation(data, Event(name, data))

    # ---- external operations ----

    def start(self, username: str | None, duration_minutes: int = WORK_MINUTES) -> Outcome[dict[str, Any]]:
        if not username or not username.strip():
            raise ValidationError("Username is required")
        if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int) or duration_minutes <= 0:
            raise ValidationError("Duration must be a positive number of minutes")

        # Destructive restart: whatever was running is replaced.
        self._state = PomodoroState(
            is_active=True,
            time_left=duration_minutes * 60,
            mode=PomodoroMode.WORK,
            session=self._state.session,
            start_time=self._clock(),
            initiated_by=username,
        )
        logger.info("Pomodoro started by %s for %d min", username, duration_minutes)
        return self._mutation(POMODORO_STARTED)

    def pause(self, username: str | None) -> Outcome[dict[str, Any]]:
        if not self._state.is_active:
            raise InvalidState("No active Pomodoro to pause")
        self._state.is_active = False
        logger.info("Pomodoro paused by %s at %ds", username, self._state.time_left)
        return self._mutation(POMODORO_PAUSED)

    def resume(self, username: str | None) -> Outcome[dict[str, Any]]:
        if self._state.is_active:
            raise InvalidState("Pomodoro is already active")
        if self._state.time_left <= 0:
            raise InvalidState("No paused Pomodoro to resume")
        self._state.is_active = True
        self._state.start_time = self._clock()
        logger.info("Pomodoro resumed by %s", username)
        return self._mutation(POMODORO_RESUMED)

    def reset(self, username: str | None) -> Outcome[dict[str, Any]]:
        self._state = PomodoroState(
            is_active=False,
            time_left=WORK_SECONDS,
            mode=PomodoroMode.WORK,
            session=self._state.session,
            start_time=None,
            initiated_by=username,
        )
        logger.info("Pomodoro reset by %s", username)
        return self._mutation(POMODORO_RESET)

    def status(self) -> PomodoroStatus:
        return PomodoroStatus.of(self._state)

    # ---- clock ----

    def tick(self) -> Outcome[dict[str, Any] | None]:
        """
        Advance by one second.

        Returns an empty, non-persisting Outcome when idle. A pomodoroTick is
        emitted only on multiples of TICK_BROADCAST_EVERY; clients interpolate
        in between.
        """
        st = self._state
        if not st.is_active or st.time_left <= 0:
            return Outcome(value=None)

        st.time_left -= 1
        out: Outcome[dict[str, Any] | None] = Outcome(value=None)

        if st.time_left % TICK_BROADCAST_EVERY == 0:
            out.events.append(Event(POMODORO_TICK, st.to_dict()))

        if st.time_left == 0:
            if st.mode == PomodoroMode.WORK:
                out.events.append(self._complete_work())
            else:
                out.events.append(self._complete_break())
            out.persist = True

        out.value = st.to_dict()
        return out

    def _complete_work(self) -> Event:
        st = self._state
        break_type = BreakType.for_session(st.session)
        st.mode = PomodoroMode.BREAK
        st.time_left = break_type.minutes * 60
        st.is_active = True
        logger.info("Work session %d completed, %s break", st.session, break_type.value)
        return Event(
            POMODORO_WORK_COMPLETED,
            {
                "message": work_completed_message(st.session, break_type),
                "pomodoro": st.to_dict(),
                "breakType": break_type.value,
            },
        )

    def _complete_break(self) -> Event:
        st = self._state
        st.mode = PomodoroMode.WORK
        # Always a standard work block, regardless of any custom start duration.
        st.time_left = WORK_SECONDS
        st.session += 1
        st.is_active = False
        logger.info("Break completed, ready for session %d", st.session)
        return Event(
            POMODORO_BREAK_COMPLETED,
            {
                "message": break_completed_message(st.session),
                "pomodoro": st.to_dict(),
            },
        )

    # ---- snapshot ----

    def to_snapshot(self) -> dict[str, Any]:
        return self._state.to_dict()

    def restore(self, state: PomodoroState) -> None:
        self._state = replace(state)
