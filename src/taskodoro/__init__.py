"""Chat-driven shared to-do list and Pomodoro timer for livestream overlays."""

__version__ = "0.1.0"
