"""Read-only statistics over the session log.

Nothing here mutates records; the engine is the only writer.  These
helpers back the statistics screen: total focus time, completed
sessions, completion rate and the daily focus streak.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

from .models import CompletedSessionRecord


@dataclass(frozen=True)
class HistorySummary:
    total_focus_seconds: int    # work time, completed or not
    completed_sessions: int     # naturally completed work sessions
    interrupted_sessions: int   # any session stopped or skipped
    total_sessions: int

    @property
    def completion_rate(self) -> float:
        """Share of logged sessions that ran to zero."""
        if self.total_sessions == 0:
            return 0.0
        return (self.total_sessions - self.interrupted_sessions) / self.total_sessions


def summarize(
    records: Iterable[CompletedSessionRecord], *, day: date | None = None
) -> HistorySummary:
    """Aggregate *records*, optionally only those started on *day*."""
    focus = completed = interrupted = total = 0
    for record in records:
        if day is not None and record.start_time.date() != day:
            continue
        total += 1
        if not record.was_completed:
            interrupted += 1
        if record.session_type.is_work:
            focus += record.actual_elapsed_duration
            if record.was_completed:
                completed += 1
    return HistorySummary(
        total_focus_seconds=focus,
        completed_sessions=completed,
        interrupted_sessions=interrupted,
        total_sessions=total,
    )


def focus_streak(records: Iterable[CompletedSessionRecord], today: date) -> int:
    """Consecutive days with at least one completed work session.

    The streak may end yesterday: a day that has not had a session
    *yet* does not break it.
    """
    days = {
        r.start_time.date()
        for r in records
        if r.was_completed and r.session_type.is_work
    }
    cursor = today if today in days else today - timedelta(days=1)
    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def format_focus_time(seconds: int) -> str:
    """``"25m"`` below an hour, ``"1h 05m"`` above."""
    minutes = max(0, seconds) // 60
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes:02d}m"
    return f"{minutes}m"
