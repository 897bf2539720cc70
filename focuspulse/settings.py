"""Cycle settings with validation and JSON persistence.

Settings are stored at:
    ~/Library/Application Support/FocusPulse/settings.json

``CycleSettings`` is immutable.  Editors build a new value and hand it
to the engine, which reads it only when the *next* session is built::

    settings = load_settings()
    settings = replace(settings, work_duration=50 * 60)
    engine.settings = settings
    save_settings(settings)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict, fields
from pathlib import Path

from loguru import logger

from .timer.models import SessionType


APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "FocusPulse"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"

_DURATION_FIELDS = ("work_duration", "short_break_duration", "long_break_duration")
_FLAG_FIELDS = (
    "auto_start_breaks", "auto_start_work", "sound_enabled", "haptic_enabled",
)


class SettingsError(ValueError):
    """A settings value that would produce a broken cycle."""


@dataclass(frozen=True)
class CycleSettings:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    work_duration: int = 25 * 60           # seconds
    short_break_duration: int = 5 * 60
    long_break_duration: int = 15 * 60
    long_break_interval: int = 4           # work sessions per long break
    auto_start_breaks: bool = False
    auto_start_work: bool = False

    # ── feedback ──────────────────────────────────────────────────────
    sound_enabled: bool = True
    haptic_enabled: bool = True

    def __post_init__(self) -> None:
        for name in _DURATION_FIELDS + ("long_break_interval",):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise SettingsError(f"{name} must be an integer, got {value!r}")
        for name in _DURATION_FIELDS:
            if getattr(self, name) <= 0:
                raise SettingsError(
                    f"{name} must be positive, got {getattr(self, name)}"
                )
        if self.long_break_interval < 1:
            raise SettingsError(
                f"long_break_interval must be at least 1, "
                f"got {self.long_break_interval}"
            )
        for name in _FLAG_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise SettingsError(f"{name} must be true or false, got {value!r}")

    # ── session factories ─────────────────────────────────────────────

    def create_work_session(self) -> SessionType:
        return SessionType.work(self.work_duration)

    def create_short_break_session(self) -> SessionType:
        return SessionType.short_break(self.short_break_duration)

    def create_long_break_session(self) -> SessionType:
        return SessionType.long_break(self.long_break_duration)


def reset_to_defaults() -> CycleSettings:
    return CycleSettings()


def load_settings(path: Path | None = None) -> CycleSettings:
    """Load settings from disk, falling back to defaults."""
    path = path or SETTINGS_PATH
    if not path.exists():
        return CycleSettings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        # Only use keys that exist in the dataclass
        valid_keys = {f.name for f in fields(CycleSettings)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return CycleSettings(**filtered)
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("Ignoring unreadable settings at {}: {}", path, exc)
    return CycleSettings()


def save_settings(settings: CycleSettings, path: Path | None = None) -> None:
    """Write settings to disk as JSON."""
    path = path or SETTINGS_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
