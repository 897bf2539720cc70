"""Shared pytest fixtures for FocusPulse tests."""

import sys
import pytest

from PyQt6.QtCore import QCoreApplication

from focuspulse.settings import CycleSettings
from focuspulse.timer.clock import VirtualClock
from focuspulse.timer.engine import TimerEngine


@pytest.fixture(scope="session")
def qapp():
    """A single QCoreApplication instance shared across the entire test run."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    yield app


@pytest.fixture
def clock():
    return VirtualClock()


@pytest.fixture
def engine(qapp, clock):
    """Fresh TimerEngine on a virtual clock, default settings, no auto-start."""
    return TimerEngine(parent=None, clock=clock)


@pytest.fixture
def engine_auto(qapp, clock):
    """Fresh TimerEngine with both auto-start flags ON."""
    settings = CycleSettings(auto_start_breaks=True, auto_start_work=True)
    return TimerEngine(parent=None, clock=clock, settings=settings)


@pytest.fixture
def engine_short(qapp, clock):
    """Tiny durations so whole cycles can run on the virtual clock."""
    settings = CycleSettings(
        work_duration=10,
        short_break_duration=3,
        long_break_duration=6,
        long_break_interval=4,
    )
    return TimerEngine(parent=None, clock=clock, settings=settings)
