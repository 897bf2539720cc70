"""Shared test helpers for FocusPulse."""

from focuspulse.timer.engine import TimerEngine


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


def complete_session(engine: TimerEngine) -> None:
    """Fast-complete the current session by jumping to the last tick."""
    engine._remaining = 1
    engine.tick()


def run_work_and_break(engine: TimerEngine) -> None:
    """From Idle or Completed(break): run one work session and its break."""
    engine.start()
    complete_session(engine)   # work
    engine.start()
    complete_session(engine)   # break
