"""
Pomodoro subsystem.

Components:
- pomodoro_models.py: PomodoroState, PomodoroMode, durations
- pomodoro_engine.py: work/break state machine (start/pause/resume/reset/tick)
- pomodoro_ticker.py: async loop that drives the tick
"""
