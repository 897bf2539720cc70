"""FocusPulse — a Pomodoro session engine."""

# The timer package must load before settings (settings builds SessionTypes).
from .timer import TimerEngine, VirtualClock, QtClock
from .settings import CycleSettings, SettingsError

__version__ = "0.1.0"

__all__ = [
    "TimerEngine",
    "VirtualClock",
    "QtClock",
    "CycleSettings",
    "SettingsError",
]
