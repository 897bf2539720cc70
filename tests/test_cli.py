"""Tests for the command-line runner."""

import signal

import pytest
from PyQt6.QtCore import QTimer
from typer.testing import CliRunner

from focuspulse.__main__ import app
from focuspulse.settings import CycleSettings
from focuspulse.timer.clock import VirtualClock
from focuspulse.timer.engine import TimerEngine
from focuspulse.timer.models import SessionKind


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.setattr("focuspulse.__main__.setup_logging", lambda *a, **k: None)
    monkeypatch.setattr("focuspulse.__main__.load_settings", lambda: CycleSettings())
    return CliRunner()


@pytest.fixture
def virtual_run(qapp, monkeypatch):
    """Run the CLI on a virtual clock that gains one second per loop pass.

    Yields the clock and the list of engines the CLI built.
    """
    clock = VirtualClock()
    engines = []
    drivers = []

    def create_engine(settings):
        engine = TimerEngine(clock=clock, settings=settings)
        driver = QTimer()
        driver.timeout.connect(lambda: clock.advance(1))
        driver.start(0)
        engines.append(engine)
        drivers.append(driver)
        return engine

    monkeypatch.setattr("focuspulse.__main__.create_engine", create_engine)
    yield clock, engines
    for driver in drivers:
        driver.stop()


# ═══════════════════════════════════════════════════════════════════════
#  ARGUMENTS
# ═══════════════════════════════════════════════════════════════════════


class TestCliValidation:
    @pytest.mark.parametrize("args", [
        ["--work", "0"],
        ["--short-break", "-5"],
        ["--long-break", "0"],
        ["--interval", "0"],
    ])
    def test_invalid_settings_exit_with_error(self, runner, args):
        result = runner.invoke(app, args)
        assert result.exit_code == 2
        assert "Invalid settings" in result.output

    def test_sessions_must_be_positive(self, runner):
        result = runner.invoke(app, ["--sessions", "0"])
        assert result.exit_code != 0

    def test_help(self, runner):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "--work" in result.output


# ═══════════════════════════════════════════════════════════════════════
#  SESSION LOOP
# ═══════════════════════════════════════════════════════════════════════


class TestCliSessionLoop:
    def test_quits_after_requested_sessions(self, runner, virtual_run):
        clock, engines = virtual_run
        result = runner.invoke(
            app, ["--work", "1", "--short-break", "1", "--sessions", "2"]
        )
        assert result.exit_code == 0, result.output

        engine, = engines
        history = engine.history
        assert len(history) == 2
        assert [r.session_type.kind for r in history] == [
            SessionKind.WORK, SessionKind.SHORT_BREAK,
        ]
        assert all(r.was_completed for r in history)
        assert engine.state.current_session is None
        assert "Focus time: 1m, completed work sessions: 1" in result.output

    def test_countdown_is_printed(self, runner, virtual_run):
        result = runner.invoke(app, ["--work", "1"])
        assert result.exit_code == 0, result.output
        assert "01:00" in result.output
        assert "00:00" in result.output

    def test_auto_chains_sessions(self, runner, virtual_run):
        clock, engines = virtual_run
        result = runner.invoke(app, [
            "--work", "1", "--short-break", "1", "--auto", "--sessions", "3",
        ])
        assert result.exit_code == 0, result.output

        engine, = engines
        assert [r.session_type.kind for r in engine.history] == [
            SessionKind.WORK, SessionKind.SHORT_BREAK, SessionKind.WORK,
        ]
        assert engine.work_sessions_completed == 2
        assert not engine.has_pending_auto_start
        # Each auto-start waits out the 2 s grace period.
        for previous, current in zip(engine.history, engine.history[1:]):
            assert (current.start_time - previous.end_time).total_seconds() == 2
        assert "Focus time: 2m, completed work sessions: 2" in result.output

    def test_interrupt_stops_running_session(self, runner, virtual_run, monkeypatch):
        clock, engines = virtual_run
        handlers = {}

        def fake_signal(signum, handler):
            handlers.setdefault(signum, handler)
            return signal.SIG_DFL

        monkeypatch.setattr(signal, "signal", fake_signal)
        clock.call_later(30.5, lambda: handlers[signal.SIGINT](signal.SIGINT, None))

        result = runner.invoke(app, ["--work", "1", "--sessions", "5"])
        assert result.exit_code == 0, result.output

        engine, = engines
        record, = engine.history
        assert record.session_type.kind is SessionKind.WORK
        assert record.was_completed is False
        assert record.actual_elapsed_duration == 30
        assert engine.state.current_session is None
        assert "completed work sessions: 0" in result.output
