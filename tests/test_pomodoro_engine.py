# tests/test_pomodoro_engine.py

from __future__ import annotations

import pytest

from taskodoro.errors import InvalidState, ValidationError
from taskodoro.pomodoro.pomodoro_engine import PomodoroEngine
from taskodoro.pomodoro.pomodoro_models import PomodoroMode, PomodoroState

from .fakes import FakeClock


@pytest.fixture()
def engine(clock: FakeClock) -> PomodoroEngine:
    return PomodoroEngine(clock=clock)


def run_ticks(engine: PomodoroEngine, n: int) -> list[str]:
    names: list[str] = []
    for _ in range(n):
        names.extend(e.name for e in engine.tick().events)
    return names


def test_default_state_is_idle_work() -> None:
    st = PomodoroEngine().state
    assert st == PomodoroState(
        is_active=False, time_left=1500, mode=PomodoroMode.WORK, session=1, start_time=None, initiated_by=None
    )


def test_start_then_status(engine: PomodoroEngine) -> None:
    out = engine.start("mod", 25)
    status = engine.status().to_dict()

    assert out.events[0].name == "pomodoroStarted"
    assert out.persist is True
    assert status["isActive"] is True
    assert status["mode"] == "work"
    assert status["timeLeft"] == 1500
    assert status["session"] == 1
    assert status["nextBreakType"] == "short"
    assert status["initiatedBy"] == "mod"


def test_start_requires_username_and_positive_duration(engine: PomodoroEngine) -> None:
    with pytest.raises(ValidationError):
        engine.start("", 25)
    with pytest.raises(ValidationError):
        engine.start(None, 25)
    with pytest.raises(ValidationError):
        engine.start("mod", 0)
    assert engine.state.is_active is False


def test_start_is_destructive_restart_and_keeps_session(engine: PomodoroEngine) -> None:
    engine.restore(PomodoroState(is_active=True, time_left=42, mode=PomodoroMode.BREAK, session=3))
    engine.start("amy", 5)
    st = engine.state
    assert (st.is_active, st.time_left, st.mode, st.session, st.initiated_by) == (
        True, 300, PomodoroMode.WORK, 3, "amy",
    )


def test_pause_resume_state_checks(engine: PomodoroEngine, clock: FakeClock) -> None:
    with pytest.raises(InvalidState):
        engine.pause("u")

    engine.start("u", 1)
    with pytest.raises(InvalidState):
        engine.resume("u")

    paused = engine.pause("u")
    assert paused.events[0].name == "pomodoroPaused"
    assert paused.value["timeLeft"] == 60
    with pytest.raises(InvalidState):
        engine.pause("u")

    clock.advance(30)
    resumed = engine.resume("u")
    assert resumed.events[0].name == "pomodoroResumed"
    assert engine.state.is_active is True
    assert engine.state.start_time == clock.now


def test_resume_with_no_time_left_is_invalid(engine: PomodoroEngine) -> None:
    engine.restore(PomodoroState(is_active=False, time_left=0))
    with pytest.raises(InvalidState):
        engine.resume("u")


def test_paused_timer_does_not_tick(engine: PomodoroEngine) -> None:
    engine.start("u", 1)
    engine.pause("u")
    out = engine.tick()
    assert out.events == []
    assert out.persist is False
    assert engine.state.time_left == 60


def test_reset_keeps_session(engine: PomodoroEngine) -> None:
    engine.restore(PomodoroState(is_active=True, time_left=100, mode=PomodoroMode.BREAK, session=6))
    out = engine.reset("mod")
    st = engine.state
    assert out.events[0].name == "pomodoroReset"
    assert (st.is_active, st.time_left, st.mode, st.session, st.start_time, st.initiated_by) == (
        False, 1500, PomodoroMode.WORK, 6, None, "mod",
    )


def test_tick_broadcasts_every_tenth_second(engine: PomodoroEngine) -> None:
    engine.start("u", 1)
    names = run_ticks(engine, 30)
    assert names.count("pomodoroTick") == 3
    assert engine.state.time_left == 30


def test_one_minute_work_session_rolls_into_short_break(engine: PomodoroEngine) -> None:
    engine.start("u", 1)
    names = run_ticks(engine, 59)
    assert "pomodoroWorkCompleted" not in names

    out = engine.tick()
    st = engine.state

    assert [e.name for e in out.events] == ["pomodoroTick", "pomodoroWorkCompleted"]
    assert out.persist is True
    assert st.mode == PomodoroMode.BREAK
    assert st.is_active is True
    assert st.time_left == 600
    assert st.session == 1

    completed = out.events[1].payload
    assert completed["breakType"] == "short"
    assert "10-minute break" in completed["message"]
    assert completed["pomodoro"]["mode"] == "break"


def test_fourth_session_gets_long_break(engine: PomodoroEngine) -> None:
    engine.restore(PomodoroState(session=4))
    engine.start("u", 1)
    assert engine.status().next_break_type.value == "long"

    run_ticks(engine, 59)
    out = engine.tick()

    assert out.events[-1].payload["breakType"] == "long"
    assert "15-minute long break" in out.events[-1].payload["message"]
    assert engine.state.time_left == 900
    # status reports session - 1 while on a break
    assert engine.status().current_session == 3


def test_break_completion_increments_session_and_stops(engine: PomodoroEngine) -> None:
    engine.start("u", 1)
    run_ticks(engine, 60)
    assert engine.state.mode == PomodoroMode.BREAK

    names = run_ticks(engine, 600)
    st = engine.state

    assert names.count("pomodoroBreakCompleted") == 1
    assert st.mode == PomodoroMode.WORK
    assert st.time_left == 1500
    assert st.session == 2
    assert st.is_active is False

    # stays put until someone starts it again
    assert run_ticks(engine, 5) == []
    assert engine.state.time_left == 1500


def test_break_completed_message_names_new_session(engine: PomodoroEngine) -> None:
    engine.restore(PomodoroState(is_active=True, time_left=1, mode=PomodoroMode.BREAK, session=2))
    out = engine.tick()
    payload = out.events[-1].payload
    assert out.events[-1].name == "pomodoroBreakCompleted"
    assert "work session 3" in payload["message"]
    assert payload["pomodoro"]["session"] == 3


@pytest.mark.parametrize(
    ("mode", "session", "current", "next_break"),
    [
        (PomodoroMode.WORK, 1, 1, "short"),
        (PomodoroMode.WORK, 4, 4, "long"),
        (PomodoroMode.WORK, 8, 8, "long"),
        (PomodoroMode.BREAK, 4, 3, "short"),
        (PomodoroMode.BREAK, 5, 4, "long"),
    ],
)
def test_status_current_session_depends_on_mode(mode, session, current, next_break) -> None:
    engine = PomodoroEngine()
    engine.restore(PomodoroState(mode=mode, session=session))
    status = engine.status().to_dict()
    assert status["currentSession"] == current
    assert status["nextBreakType"] == next_break


def test_state_from_dict_is_lenient() -> None:
    st = PomodoroState.from_dict({"mode": "nap", "timeLeft": "abc", "session": 0, "startTime": 1_700_000_000_000})
    assert st.mode == PomodoroMode.WORK
    assert st.time_left == 1500
    assert st.session == 1
    assert st.start_time == 1_700_000_000.0
