"""Feedback intents emitted by the timer engine.

The engine does not play audio or drive haptics.  On every visible
transition it emits a :class:`FeedbackEvent` describing what *should*
happen; a :class:`FeedbackDispatcher` on the presentation side forwards
it to whatever players are registered.

Cue           Haptic
---           ------
``start``     light   (new session or resume)
``pause``     light
``stop``      medium
``skip``      light
``complete``  heavy
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from loguru import logger
from PyQt6.QtCore import QObject, pyqtSignal


class FeedbackCue(Enum):
    START = "start"
    PAUSE = "pause"
    STOP = "stop"
    COMPLETE = "complete"
    SKIP = "skip"


class HapticStyle(Enum):
    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"


CUE_HAPTICS: dict[FeedbackCue, HapticStyle] = {
    FeedbackCue.START: HapticStyle.LIGHT,
    FeedbackCue.PAUSE: HapticStyle.LIGHT,
    FeedbackCue.STOP: HapticStyle.MEDIUM,
    FeedbackCue.SKIP: HapticStyle.LIGHT,
    FeedbackCue.COMPLETE: HapticStyle.HEAVY,
}


@dataclass(frozen=True)
class FeedbackEvent:
    cue: FeedbackCue
    play_sound: bool
    haptic: HapticStyle | None   # None when haptics are disabled

    @classmethod
    def for_cue(
        cls, cue: FeedbackCue, *, sound_enabled: bool, haptic_enabled: bool
    ) -> FeedbackEvent | None:
        """Build the event for *cue*, or ``None`` if both channels are off."""
        if not sound_enabled and not haptic_enabled:
            return None
        return cls(
            cue=cue,
            play_sound=sound_enabled,
            haptic=CUE_HAPTICS[cue] if haptic_enabled else None,
        )


SoundHandler = Callable[[FeedbackCue], None]
HapticHandler = Callable[[HapticStyle], None]


class FeedbackDispatcher(QObject):
    """Fan feedback events out to sound and haptic players.

    A failing player is logged and skipped; the engine never sees the
    error.

    Usage::

        dispatcher = FeedbackDispatcher(parent=self)
        dispatcher.add_sound_handler(player.play)
        dispatcher.attach(engine)
    """

    dispatched = pyqtSignal(object)   # FeedbackEvent, after fan-out

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._enabled = True
        self._sound_handlers: list[SoundHandler] = []
        self._haptic_handlers: list[HapticHandler] = []

    # ── public API ────────────────────────────────────────────────────

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def add_sound_handler(self, handler: SoundHandler) -> None:
        self._sound_handlers.append(handler)

    def add_haptic_handler(self, handler: HapticHandler) -> None:
        self._haptic_handlers.append(handler)

    def attach(self, engine) -> None:
        """Listen to ``engine.feedback``."""
        engine.feedback.connect(self.dispatch)

    def dispatch(self, event: FeedbackEvent) -> None:
        """Forward *event* to the registered players.  Never raises."""
        if not self._enabled:
            return
        if event.play_sound:
            for handler in self._sound_handlers:
                self._call(handler, event.cue)
        if event.haptic is not None:
            for handler in self._haptic_handlers:
                self._call(handler, event.haptic)
        self.dispatched.emit(event)

    # ── internal ──────────────────────────────────────────────────────

    @staticmethod
    def _call(handler: Callable, arg: object) -> None:
        try:
            handler(arg)
        except Exception:
            logger.exception("Feedback handler {!r} failed for {}", handler, arg)
