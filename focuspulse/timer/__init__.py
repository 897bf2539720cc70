"""Timer package."""

from .models import (
    SessionKind,
    SessionType,
    EngineState,
    Idle,
    Running,
    Paused,
    Completed,
    IDLE,
    CompletedSessionRecord,
    CycleProgress,
    next_session_type,
    compute_cycle_progress,
    format_clock,
)
from .clock import Clock, QtClock, VirtualClock, ScheduledCall
from .engine import TimerEngine, TICK_INTERVAL, AUTO_START_DELAY
from .history import HistorySummary, summarize, focus_streak, format_focus_time

__all__ = [
    "SessionKind",
    "SessionType",
    "EngineState",
    "Idle",
    "Running",
    "Paused",
    "Completed",
    "IDLE",
    "CompletedSessionRecord",
    "CycleProgress",
    "next_session_type",
    "compute_cycle_progress",
    "format_clock",
    "Clock",
    "QtClock",
    "VirtualClock",
    "ScheduledCall",
    "TimerEngine",
    "TICK_INTERVAL",
    "AUTO_START_DELAY",
    "HistorySummary",
    "summarize",
    "focus_streak",
    "format_focus_time",
]
