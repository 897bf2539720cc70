"""Sound and haptic feedback intents."""

from .cues import (
    FeedbackCue,
    HapticStyle,
    FeedbackEvent,
    FeedbackDispatcher,
    CUE_HAPTICS,
)

__all__ = [
    "FeedbackCue",
    "HapticStyle",
    "FeedbackEvent",
    "FeedbackDispatcher",
    "CUE_HAPTICS",
]
