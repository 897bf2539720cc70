"""Value types for the FocusPulse timer.

Session types
-------------
``SessionType`` pairs a :class:`SessionKind` with the duration it was
built with.  Durations are captured when a session starts, so editing
the settings mid-session never changes the clock that is running.

Engine states
-------------
``EngineState`` is a closed union of four frozen variants::

    Idle                      nothing on the clock
    Running(session)          counting down
    Paused(session)           frozen, remaining time kept
    Completed(session)        countdown reached zero, next not started yet

Cycle policy
------------
:func:`next_session_type` and :func:`compute_cycle_progress` are pure
functions of the settings and the natural work-completion counter.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from ..settings import CycleSettings


# ── session kinds ────────────────────────────────────────────────────────


class SessionKind(Enum):
    WORK = "work"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"


_DISPLAY_NAMES: dict[SessionKind, str] = {
    SessionKind.WORK: "Work Session",
    SessionKind.SHORT_BREAK: "Short Break",
    SessionKind.LONG_BREAK: "Long Break",
}


def format_clock(seconds: int | float) -> str:
    """``MM:SS`` with zero padding.  Minutes are not wrapped at 60."""
    total = max(0, int(seconds))
    minutes, secs = divmod(total, 60)
    return f"{minutes:02d}:{secs:02d}"


@dataclass(frozen=True)
class SessionType:
    """One interval kind together with its duration in seconds."""

    kind: SessionKind
    duration: int

    def __post_init__(self) -> None:
        if self.duration <= 0:
            raise ValueError(
                f"session duration must be positive, got {self.duration}"
            )

    @classmethod
    def work(cls, duration: int) -> SessionType:
        return cls(SessionKind.WORK, duration)

    @classmethod
    def short_break(cls, duration: int) -> SessionType:
        return cls(SessionKind.SHORT_BREAK, duration)

    @classmethod
    def long_break(cls, duration: int) -> SessionType:
        return cls(SessionKind.LONG_BREAK, duration)

    @property
    def is_work(self) -> bool:
        return self.kind is SessionKind.WORK

    @property
    def is_break(self) -> bool:
        return not self.is_work

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self.kind]


# ── engine states ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Idle:
    is_running = False
    is_paused = False

    @property
    def current_session(self) -> SessionType | None:
        return None


@dataclass(frozen=True)
class Running:
    session: SessionType
    is_running = True
    is_paused = False

    @property
    def current_session(self) -> SessionType | None:
        return self.session


@dataclass(frozen=True)
class Paused:
    session: SessionType
    is_running = False
    is_paused = True

    @property
    def current_session(self) -> SessionType | None:
        return self.session


@dataclass(frozen=True)
class Completed:
    session: SessionType
    is_running = False
    is_paused = False

    @property
    def current_session(self) -> SessionType | None:
        return self.session


EngineState = Union[Idle, Running, Paused, Completed]

IDLE = Idle()


# ── history and progress ─────────────────────────────────────────────────


@dataclass(frozen=True)
class CompletedSessionRecord:
    """One entry in the session log.  Written once, never modified."""

    session_type: SessionType
    start_time: datetime
    end_time: datetime
    actual_elapsed_duration: int   # seconds
    was_completed: bool
    id: uuid.UUID = field(default_factory=uuid.uuid4, compare=False)

    @property
    def display_duration(self) -> str:
        return format_clock(self.actual_elapsed_duration)


@dataclass(frozen=True)
class CycleProgress:
    current_session_index: int
    total_sessions_in_cycle: int
    cycles_completed_today: int

    @property
    def progress_percentage(self) -> float:
        if self.total_sessions_in_cycle <= 0:
            return 0.0
        return self.current_session_index / self.total_sessions_in_cycle


# ── cycle policy ─────────────────────────────────────────────────────────


def next_session_type(
    current: SessionType | None,
    settings: CycleSettings,
    work_sessions_completed: int,
) -> SessionType:
    """Pick the session that follows *current*.

    After work: a long break every ``long_break_interval`` natural work
    completions, a short break otherwise.  After any break, or with no
    current session: work.
    """
    if current is None or current.is_break:
        return settings.create_work_session()

    if (
        work_sessions_completed > 0
        and work_sessions_completed % settings.long_break_interval == 0
    ):
        return settings.create_long_break_session()
    return settings.create_short_break_session()


def compute_cycle_progress(
    work_sessions_completed: int, long_break_interval: int
) -> CycleProgress:
    """Derived view of where the counter sits inside the current cycle.

    Each cycle has ``long_break_interval`` work slots and as many break
    slots, so the index advances by two per completed work session.
    """
    total = long_break_interval * 2
    return CycleProgress(
        current_session_index=(work_sessions_completed * 2) % total,
        total_sessions_in_cycle=total,
        cycles_completed_today=work_sessions_completed // long_break_interval,
    )
