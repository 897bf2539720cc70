"""Clock sources that drive the timer engine.

The engine never touches ``QTimer`` or ``datetime.now`` directly.  It asks
its clock for the current time and for scheduled callbacks:

``QtClock``       real wall-clock time on the Qt event loop.
``VirtualClock``  time that only moves when ``advance()`` is called.
                  Used by the tests, no event loop required.

Repeating callbacks catch up after a stall: if the event loop was blocked
or the machine slept for 5 s, the next timeout delivers 5 callbacks rather
than one, so the countdown follows elapsed time instead of timer wakeups.
"""

from __future__ import annotations

import heapq
import itertools
import time
from datetime import datetime, timedelta
from typing import Callable

from PyQt6.QtCore import QObject, Qt, QTimer


Callback = Callable[[], None]


# ── handles ──────────────────────────────────────────────────────────────


class ScheduledCall:
    """Token for a pending callback.  ``cancel()`` is idempotent."""

    def __init__(self) -> None:
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        self._active = False


class Clock:
    """Interface shared by every clock source."""

    def now(self) -> datetime:
        raise NotImplementedError

    def call_later(self, delay: float, callback: Callback) -> ScheduledCall:
        """Run *callback* once, *delay* seconds from now."""
        raise NotImplementedError

    def schedule_repeating(
        self, interval: float, callback: Callback
    ) -> ScheduledCall:
        """Run *callback* every *interval* seconds until cancelled."""
        raise NotImplementedError


# ══════════════════════════════════════════════════════════════════════════
#  QT CLOCK
# ══════════════════════════════════════════════════════════════════════════


class _QtCall(ScheduledCall):
    """A ``QTimer`` plus the callback it drives."""

    def __init__(self, timer: QTimer, callback: Callback) -> None:
        super().__init__()
        self._timer = timer
        self._callback = callback
        timer.timeout.connect(self._fire)

    def cancel(self) -> None:
        if self._active:
            self._timer.stop()
            self._timer.deleteLater()
        super().cancel()

    def _fire(self) -> None:
        if not self._active:
            return
        self.cancel()
        self._callback()


class _QtRepeatingCall(_QtCall):
    """Delivers one callback per whole interval elapsed since the last."""

    def __init__(
        self,
        timer: QTimer,
        callback: Callback,
        interval: float,
        monotonic: Callable[[], float],
    ) -> None:
        super().__init__(timer, callback)
        self._interval = interval
        self._monotonic = monotonic
        self._anchor = monotonic()

    def _fire(self) -> None:
        if not self._active:
            return
        due = int((self._monotonic() - self._anchor) // self._interval)
        if due <= 0:
            return
        self._anchor += due * self._interval
        for _ in range(due):
            # The callback may cancel us (e.g. session completed).
            if not self._active:
                break
            self._callback()


class QtClock(Clock):
    """Wall-clock source backed by ``QTimer``.

    Must be used from the thread that runs the Qt event loop.
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._parent = parent
        self._monotonic = monotonic

    def now(self) -> datetime:
        return datetime.now()

    def call_later(self, delay: float, callback: Callback) -> ScheduledCall:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        timer.setInterval(max(0, int(delay * 1000)))
        call = _QtCall(timer, callback)
        timer.start()
        return call

    def schedule_repeating(
        self, interval: float, callback: Callback
    ) -> ScheduledCall:
        if interval <= 0:
            raise ValueError("interval must be positive")
        timer = QTimer(self._parent)
        timer.setInterval(max(1, int(interval * 1000)))
        # Coarse timers may fire 5% early, which would drop a whole tick.
        timer.setTimerType(Qt.TimerType.PreciseTimer)
        call = _QtRepeatingCall(timer, callback, interval, self._monotonic)
        timer.start()
        return call


# ══════════════════════════════════════════════════════════════════════════
#  VIRTUAL CLOCK
# ══════════════════════════════════════════════════════════════════════════


class _VirtualCall(ScheduledCall):
    def __init__(self, callback: Callback, interval: float | None) -> None:
        super().__init__()
        self.callback = callback
        self.interval = interval


class VirtualClock(Clock):
    """Deterministic clock for tests.

    Usage::

        clock = VirtualClock()
        engine = TimerEngine(clock=clock)
        engine.start()
        clock.advance(60)      # 60 ticks delivered, in order
    """

    def __init__(self, start: datetime | None = None) -> None:
        self._origin = start or datetime(2024, 1, 1, 9, 0, 0)
        self._elapsed: float = 0.0
        self._queue: list[tuple[float, int, _VirtualCall]] = []
        self._seq = itertools.count()

    @property
    def elapsed(self) -> float:
        """Seconds advanced since construction."""
        return self._elapsed

    def now(self) -> datetime:
        return self._origin + timedelta(seconds=self._elapsed)

    def call_later(self, delay: float, callback: Callback) -> ScheduledCall:
        call = _VirtualCall(callback, None)
        self._push(self._elapsed + max(0.0, delay), call)
        return call

    def schedule_repeating(
        self, interval: float, callback: Callback
    ) -> ScheduledCall:
        if interval <= 0:
            raise ValueError("interval must be positive")
        call = _VirtualCall(callback, interval)
        self._push(self._elapsed + interval, call)
        return call

    def pending(self) -> int:
        """Number of scheduled calls that have not been cancelled."""
        return sum(1 for _, _, call in self._queue if call.active)

    def advance(self, seconds: float) -> None:
        """Move time forward, firing everything that falls due in order."""
        target = self._elapsed + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, call = heapq.heappop(self._queue)
            if not call.active:
                continue
            self._elapsed = due
            if call.interval is None:
                call.cancel()
            else:
                self._push(due + call.interval, call)
            call.callback()
        self._elapsed = target

    def _push(self, due: float, call: _VirtualCall) -> None:
        heapq.heappush(self._queue, (due, next(self._seq), call))
