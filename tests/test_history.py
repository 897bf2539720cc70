"""Tests for the history summary helpers."""

from datetime import date, datetime, timedelta

import pytest

from focuspulse.timer.history import focus_streak, format_focus_time, summarize
from focuspulse.timer.models import CompletedSessionRecord, SessionType

from helpers import complete_session


def _record(kind, elapsed, completed, when):
    session = {
        "work": SessionType.work(1500),
        "short": SessionType.short_break(300),
        "long": SessionType.long_break(900),
    }[kind]
    return CompletedSessionRecord(
        session_type=session,
        start_time=when,
        end_time=when + timedelta(seconds=elapsed),
        actual_elapsed_duration=elapsed,
        was_completed=completed,
    )


DAY = datetime(2024, 5, 10, 9, 0)


class TestSummarize:
    def test_empty(self):
        s = summarize([])
        assert s.total_focus_seconds == 0
        assert s.completed_sessions == 0
        assert s.completion_rate == 0.0

    def test_counts_work_focus_time_only(self):
        records = [
            _record("work", 1500, True, DAY),
            _record("short", 300, True, DAY),
            _record("work", 100, False, DAY),
        ]
        s = summarize(records)
        assert s.total_focus_seconds == 1600
        assert s.completed_sessions == 1
        assert s.interrupted_sessions == 1
        assert s.total_sessions == 3
        assert s.completion_rate == pytest.approx(2 / 3)

    def test_day_filter(self):
        records = [
            _record("work", 1500, True, DAY),
            _record("work", 1500, True, DAY - timedelta(days=1)),
        ]
        s = summarize(records, day=DAY.date())
        assert s.completed_sessions == 1
        assert s.total_sessions == 1

    def test_summarize_engine_history(self, engine, clock):
        engine.start()
        complete_session(engine)
        engine.start()          # short break
        clock.advance(60)
        engine.stop()
        s = summarize(engine.history)
        assert s.total_focus_seconds == 1500
        assert s.completed_sessions == 1
        assert s.interrupted_sessions == 1


class TestFocusStreak:
    def test_no_records(self):
        assert focus_streak([], date(2024, 5, 10)) == 0

    def test_consecutive_days(self):
        records = [_record("work", 1500, True, DAY - timedelta(days=i)) for i in range(3)]
        assert focus_streak(records, DAY.date()) == 3

    def test_streak_can_end_yesterday(self):
        records = [_record("work", 1500, True, DAY - timedelta(days=i)) for i in (1, 2)]
        assert focus_streak(records, DAY.date()) == 2

    def test_gap_breaks_streak(self):
        records = [_record("work", 1500, True, DAY - timedelta(days=i)) for i in (0, 2, 3)]
        assert focus_streak(records, DAY.date()) == 1

    def test_interrupted_and_break_sessions_do_not_count(self):
        records = [
            _record("work", 100, False, DAY),
            _record("short", 300, True, DAY),
        ]
        assert focus_streak(records, DAY.date()) == 0

    def test_multiple_sessions_same_day(self):
        records = [_record("work", 1500, True, DAY + timedelta(hours=h)) for h in range(3)]
        assert focus_streak(records, DAY.date()) == 1


class TestFormatFocusTime:
    @pytest.mark.parametrize("seconds, text", [
        (0, "0m"),
        (59, "0m"),
        (25 * 60, "25m"),
        (3600, "1h 00m"),
        (3600 + 5 * 60, "1h 05m"),
        (10 * 3600 + 59 * 60, "10h 59m"),
    ])
    def test_format(self, seconds, text):
        assert format_focus_time(seconds) == text
