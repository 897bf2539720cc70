"""Timer state machine for FocusPulse.

States
------
Idle                Nothing on the clock.
Running(session)    Countdown in progress.
Paused(session)     Countdown frozen, remaining time kept.
Completed(session)  Countdown reached zero; next session not started yet.

Transitions
-----------
Idle → Running(work)                       (start)
Paused(s) → Running(s)                     (start — resume)
Completed(s) → Running(next)               (start, or auto-start after 2 s)
Running(s) → Paused(s)                     (pause)
Running | Paused → Idle                    (stop — logged as interrupted)
Running | Paused → Running(next)           (skip — logged as interrupted)
Running(s) → Completed(s)                  (tick reaches 0)
Any → Idle, counters zeroed                (reset)

Every command is a silent no-op when its precondition does not hold.
Use ``can_start`` / ``can_pause`` / ``can_stop`` / ``can_skip`` to
gate UI affordances.

Only natural completions count: ``skip()`` and ``stop()`` never advance
``work_sessions_completed``, so skipping work does not bring the long
break closer.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from loguru import logger
from PyQt6.QtCore import QObject, pyqtSignal

from ..feedback.cues import FeedbackCue, FeedbackEvent
from ..settings import CycleSettings
from .clock import Clock, QtClock, ScheduledCall
from .models import (
    IDLE,
    Completed,
    CompletedSessionRecord,
    CycleProgress,
    EngineState,
    Idle,
    Paused,
    Running,
    SessionType,
    compute_cycle_progress,
    format_clock,
    next_session_type,
)


# ── constants ─────────────────────────────────────────────────────────────

TICK_INTERVAL = 1.0      # seconds per tick
AUTO_START_DELAY = 2.0   # grace period before an auto-started session


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine(QObject):
    """Pomodoro engine: one session at a time, history, cycle counters.

    Signals
    -------
    changed()
        Emitted after every mutation of observable state.
    state_changed(state: EngineState)
        Emitted on every state transition.
    ticked(remaining_seconds: int)
        Emitted after each one-second decrement.
    session_recorded(record: CompletedSessionRecord)
        Emitted whenever a record is appended (stop, skip, completion).
    session_completed(record: CompletedSessionRecord)
        Emitted only for natural completions.
    cycle_progress_changed(progress: CycleProgress)
        Emitted when the derived cycle progress is recomputed.
    settings_changed(settings: CycleSettings)
    feedback(event: FeedbackEvent)
        Sound / haptic intent, already gated by the settings toggles.
    """

    changed = pyqtSignal()
    state_changed = pyqtSignal(object)
    ticked = pyqtSignal(int)
    session_recorded = pyqtSignal(object)
    session_completed = pyqtSignal(object)
    cycle_progress_changed = pyqtSignal(object)
    settings_changed = pyqtSignal(object)
    feedback = pyqtSignal(object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        clock: Clock | None = None,
        settings: CycleSettings | None = None,
    ) -> None:
        super().__init__(parent)

        # ── configuration ─────────────────────────────────────────────
        self._clock: Clock = clock or QtClock(self)
        self._settings: CycleSettings = settings or CycleSettings()

        # ── session state ─────────────────────────────────────────────
        self._state: EngineState = IDLE
        self._current_session: SessionType | None = None
        self._remaining: int = 0
        self._start_time: datetime | None = None

        # ── history / counters ────────────────────────────────────────
        self._history: list[CompletedSessionRecord] = []
        self._work_sessions_completed: int = 0
        self._cycle_progress: CycleProgress = compute_cycle_progress(
            0, self._settings.long_break_interval
        )

        # ── scheduled callbacks ───────────────────────────────────────
        self._ticker: ScheduledCall | None = None
        self._pending_start: ScheduledCall | None = None

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def current_session(self) -> SessionType | None:
        return self._current_session

    @property
    def remaining_time(self) -> int:
        """Seconds left on the clock (0 when idle)."""
        return self._remaining

    @property
    def start_time(self) -> datetime | None:
        return self._start_time

    @property
    def history(self) -> tuple[CompletedSessionRecord, ...]:
        """Every logged session, oldest first."""
        return tuple(self._history)

    @property
    def work_sessions_completed(self) -> int:
        return self._work_sessions_completed

    @property
    def cycle_progress(self) -> CycleProgress:
        return self._cycle_progress

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def settings(self) -> CycleSettings:
        return self._settings

    @settings.setter
    def settings(self, value: CycleSettings) -> None:
        """Replace the settings.  Takes effect with the next session."""
        if not isinstance(value, CycleSettings):
            raise TypeError(f"expected CycleSettings, got {type(value).__name__}")
        if value == self._settings:
            return
        self._settings = value
        logger.debug("Settings replaced: {}", value)
        self.settings_changed.emit(value)
        self.changed.emit()

    def update_settings(self, **changes) -> CycleSettings:
        """Copy the current settings with *changes* applied and use them.

        Raises ``SettingsError`` for invalid values; the engine keeps
        its previous settings in that case.
        """
        new = replace(self._settings, **changes)
        self.settings = new
        return new

    @property
    def is_running(self) -> bool:
        return self._state.is_running

    @property
    def has_pending_auto_start(self) -> bool:
        return self._pending_start is not None and self._pending_start.active

    @property
    def formatted_remaining_time(self) -> str:
        """``MM:SS``; minutes may exceed 59."""
        return format_clock(self._remaining)

    @property
    def progress_percentage(self) -> float:
        """0.0 → 1.0 through the active session, 0.0 when idle."""
        session = self._state.current_session
        if session is None:
            return 0.0
        return (session.duration - self._remaining) / session.duration

    # ── capability predicates ─────────────────────────────────────────

    @property
    def can_start(self) -> bool:
        return isinstance(self._state, (Idle, Paused, Completed))

    @property
    def can_pause(self) -> bool:
        return self._state.is_running

    @property
    def can_stop(self) -> bool:
        return isinstance(self._state, (Running, Paused))

    @property
    def can_skip(self) -> bool:
        return isinstance(self._state, (Running, Paused))

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        """Start a work session, resume a paused one, or begin the next.

        No-op while running.
        """
        state = self._state
        if isinstance(state, Idle):
            self._cancel_pending_start()
            self._begin_session(self._settings.create_work_session())
        elif isinstance(state, Paused):
            self._set_state(Running(state.session))
            self._start_ticker()
            self._emit_feedback(FeedbackCue.START)
            self.changed.emit()
        elif isinstance(state, Completed):
            self._cancel_pending_start()
            self._begin_next_session()

    def pause(self) -> None:
        if not isinstance(self._state, Running):
            return
        self._stop_ticker()
        self._set_state(Paused(self._state.session))
        self._emit_feedback(FeedbackCue.PAUSE)
        self.changed.emit()

    def stop(self) -> None:
        """Abandon the session and return to Idle.

        A running or paused session is logged as interrupted.  From
        Completed this only cancels a pending auto-start; the session
        was logged when it finished.
        """
        state = self._state
        if isinstance(state, Idle):
            return
        self._cancel_pending_start()
        self._stop_ticker()

        record = None
        if isinstance(state, (Running, Paused)):
            session = state.session
            record = self._append_record(
                session,
                elapsed=session.duration - self._remaining,
                was_completed=False,
            )

        self._remaining = 0
        self._current_session = None
        self._start_time = None
        self._set_state(IDLE)
        self._emit_feedback(FeedbackCue.STOP)
        if record is not None:
            self.session_recorded.emit(record)
        self.changed.emit()

    def skip(self) -> None:
        """Log the current session as interrupted and start the next one.

        Starts the next session immediately, whatever the auto-start
        settings say.
        """
        state = self._state
        if not isinstance(state, (Running, Paused)):
            return
        self._cancel_pending_start()
        self._stop_ticker()
        session = state.session
        record = self._append_record(
            session,
            elapsed=session.duration - self._remaining,
            was_completed=False,
        )
        self._begin_session(
            next_session_type(
                session, self._settings, self._work_sessions_completed
            ),
            cue=FeedbackCue.SKIP,
        )
        self.session_recorded.emit(record)

    def reset(self) -> None:
        """``stop()`` plus zeroed work counter and cycle progress."""
        self.stop()
        self._work_sessions_completed = 0
        self._update_cycle_progress()
        self.changed.emit()

    def tick(self) -> None:
        """Advance the countdown by one second.  Only while running."""
        if not isinstance(self._state, Running):
            return
        if self._remaining <= 0:
            self._complete_session()
            return

        self._remaining -= 1
        self.ticked.emit(self._remaining)
        if self._remaining <= 0:
            self._complete_session()
        else:
            self.changed.emit()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — session lifecycle
    # ══════════════════════════════════════════════════════════════════

    def _begin_session(
        self, session: SessionType, cue: FeedbackCue = FeedbackCue.START
    ) -> None:
        self._current_session = session
        self._remaining = session.duration
        self._start_time = self._clock.now()
        self._set_state(Running(session))
        self._start_ticker()
        self._update_cycle_progress()
        self._emit_feedback(cue)
        self.changed.emit()

    def _begin_next_session(self) -> None:
        self._begin_session(
            next_session_type(
                self._state.current_session,
                self._settings,
                self._work_sessions_completed,
            )
        )

    def _complete_session(self) -> None:
        self._stop_ticker()
        session = self._state.current_session
        record = self._append_record(
            session, elapsed=session.duration, was_completed=True
        )
        if session.is_work:
            self._work_sessions_completed += 1
            self._update_cycle_progress()

        self._set_state(Completed(session))
        self._emit_feedback(FeedbackCue.COMPLETE)

        if self._should_auto_start(session):
            self._pending_start = self._clock.call_later(
                AUTO_START_DELAY, self._on_auto_start
            )
            logger.debug("Auto-start scheduled in {}s", AUTO_START_DELAY)

        self.session_recorded.emit(record)
        self.session_completed.emit(record)
        self.changed.emit()

    def _should_auto_start(self, finished: SessionType) -> bool:
        if finished.is_work:
            return self._settings.auto_start_breaks
        return self._settings.auto_start_work

    def _on_auto_start(self) -> None:
        self._pending_start = None
        # A command issued during the grace period supersedes us.
        if isinstance(self._state, Completed):
            self._begin_next_session()

    def _append_record(
        self, session: SessionType, *, elapsed: int, was_completed: bool
    ) -> CompletedSessionRecord:
        record = CompletedSessionRecord(
            session_type=session,
            start_time=self._start_time or self._clock.now(),
            end_time=self._clock.now(),
            actual_elapsed_duration=elapsed,
            was_completed=was_completed,
        )
        self._history.append(record)
        logger.info(
            "{} {} after {}",
            session.display_name,
            "completed" if was_completed else "interrupted",
            record.display_duration,
        )
        return record

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — plumbing
    # ══════════════════════════════════════════════════════════════════

    def _start_ticker(self) -> None:
        self._stop_ticker()
        self._ticker = self._clock.schedule_repeating(TICK_INTERVAL, self.tick)

    def _stop_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    def _cancel_pending_start(self) -> None:
        if self._pending_start is not None:
            self._pending_start.cancel()
            self._pending_start = None
            logger.debug("Pending auto-start cancelled")

    def _update_cycle_progress(self) -> None:
        progress = compute_cycle_progress(
            self._work_sessions_completed, self._settings.long_break_interval
        )
        if progress != self._cycle_progress:
            self._cycle_progress = progress
            self.cycle_progress_changed.emit(progress)

    def _set_state(self, new_state: EngineState) -> None:
        logger.debug("Timer {} -> {}", self._state, new_state)
        self._state = new_state
        self.state_changed.emit(new_state)

    def _emit_feedback(self, cue: FeedbackCue) -> None:
        event = FeedbackEvent.for_cue(
            cue,
            sound_enabled=self._settings.sound_enabled,
            haptic_enabled=self._settings.haptic_enabled,
        )
        if event is not None:
            self.feedback.emit(event)
