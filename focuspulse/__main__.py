"""Run FocusPulse headless from a terminal: python -m focuspulse."""

from __future__ import annotations

import signal
import sys
from dataclasses import replace
from typing import Optional

import typer
from loguru import logger
from PyQt6.QtCore import QCoreApplication, QTimer

from .feedback import FeedbackDispatcher
from .logger import setup_logging
from .settings import CycleSettings, SettingsError, load_settings
from .timer import TimerEngine, summarize, format_focus_time


def create_engine(settings: CycleSettings) -> TimerEngine:
    """Engine on the wall clock."""
    return TimerEngine(settings=settings)


app = typer.Typer(
    name="focuspulse",
    help="Pomodoro focus timer: work, break, repeat.",
    add_completion=False,
)


@app.command()
def run(
    work: Optional[int] = typer.Option(None, "--work", help="Work minutes"),
    short_break: Optional[int] = typer.Option(
        None, "--short-break", help="Short break minutes"
    ),
    long_break: Optional[int] = typer.Option(
        None, "--long-break", help="Long break minutes"
    ),
    interval: Optional[int] = typer.Option(
        None, "--interval", help="Work sessions per long break"
    ),
    auto: bool = typer.Option(
        False, "--auto", help="Auto-start breaks and work after a 2 s pause"
    ),
    sessions: int = typer.Option(
        1, "--sessions", min=1, help="Quit after this many logged sessions"
    ),
    log_level: str = typer.Option("INFO", "--log-level", help="Console log level"),
) -> None:
    """Run sessions on the wall clock, printing the countdown."""
    setup_logging(log_level)

    settings = load_settings()
    overrides: dict = {}
    if work is not None:
        overrides["work_duration"] = work * 60
    if short_break is not None:
        overrides["short_break_duration"] = short_break * 60
    if long_break is not None:
        overrides["long_break_duration"] = long_break * 60
    if interval is not None:
        overrides["long_break_interval"] = interval
    if auto:
        overrides["auto_start_breaks"] = True
        overrides["auto_start_work"] = True
    try:
        settings = replace(settings, **overrides)
    except SettingsError as exc:
        typer.echo(f"Invalid settings: {exc}", err=True)
        raise typer.Exit(code=2)

    qapp = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    qapp.setApplicationName("FocusPulse")

    engine = create_engine(settings)
    dispatcher = FeedbackDispatcher(parent=engine)
    dispatcher.add_sound_handler(lambda cue: logger.debug("Sound cue: {}", cue.value))
    dispatcher.attach(engine)

    def _show(_remaining: int) -> None:
        session = engine.current_session
        name = session.display_name if session else ""
        typer.echo(f"\r{name:<13} {engine.formatted_remaining_time}", nl=False)

    quitting = False

    def _quit() -> None:
        nonlocal quitting
        quitting = True
        engine.stop()
        qapp.quit()

    def _after_record() -> None:
        if quitting:
            return
        if len(engine.history) >= sessions:
            _quit()
        elif engine.can_start and not engine.has_pending_auto_start:
            engine.start()

    def _recorded(_record) -> None:
        typer.echo("")
        # Leave the engine's signal emission before issuing commands.
        QTimer.singleShot(0, _after_record)

    engine.ticked.connect(_show)
    engine.session_recorded.connect(_recorded)

    def _interrupt(*_args) -> None:
        _quit()

    previous_handler = signal.signal(signal.SIGINT, _interrupt)
    # Give the interpreter a chance to run the SIGINT handler.
    wakeup = QTimer()
    wakeup.timeout.connect(lambda: None)
    wakeup.start(200)

    try:
        engine.start()
        _show(engine.remaining_time)
        qapp.exec()
    finally:
        wakeup.stop()
        if previous_handler is not None:
            signal.signal(signal.SIGINT, previous_handler)

    summary = summarize(engine.history)
    typer.echo(
        f"\nFocus time: {format_focus_time(summary.total_focus_seconds)}, "
        f"completed work sessions: {summary.completed_sessions}"
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
