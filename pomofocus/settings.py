"""
User-tunable settings — interval durations and timer policy flags,
persisted to data/settings.json.

The store is handed to the service explicitly; the engine only ever sees the
ModeCatalog and EnginePolicy built from a snapshot. Persistence failures are
logged and tolerated: the in-memory state stays authoritative for the session.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Mapping

from .timer.engine import EnginePolicy
from .timer.modes import IntervalMode, ModeCatalog, clamp_minutes

logger = logging.getLogger(__name__)

DEFAULTS: dict[str, Any] = {
    "pomodoro_minutes":    45,
    "short_break_minutes": 15,
    "long_break_minutes":  30,
    "auto_switch":         True,
    "sound_enabled":       True,
    "animations_enabled":  True,
}

_MINUTE_KEYS = {
    IntervalMode.WORK: "pomodoro_minutes",
    IntervalMode.SHORT_BREAK: "short_break_minutes",
    IntervalMode.LONG_BREAK: "long_break_minutes",
}


def _coerce(default: Any, value: Any) -> Any:
    """Coerce *value* to the type of *default*."""
    if isinstance(default, bool):
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)
    return type(default)(value)


@dataclass
class SettingsSnapshot:
    pomodoro_minutes: int = DEFAULTS["pomodoro_minutes"]
    short_break_minutes: int = DEFAULTS["short_break_minutes"]
    long_break_minutes: int = DEFAULTS["long_break_minutes"]
    auto_switch: bool = DEFAULTS["auto_switch"]
    sound_enabled: bool = DEFAULTS["sound_enabled"]
    animations_enabled: bool = DEFAULTS["animations_enabled"]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SettingsSnapshot":
        """Build from a raw mapping; unknown keys are ignored, bad values fall back to defaults."""
        values = dict(DEFAULTS)
        for k, v in data.items():
            if k not in DEFAULTS:
                continue
            try:
                values[k] = _coerce(DEFAULTS[k], v)
            except (TypeError, ValueError, OverflowError):
                logger.warning("ignoring invalid setting %s=%r", k, v)
        for key in _MINUTE_KEYS.values():
            values[key] = clamp_minutes(values[key])
        return cls(**values)

    @classmethod
    def capture(cls, catalog: ModeCatalog, policy: EnginePolicy) -> "SettingsSnapshot":
        minutes = {key: catalog.get_minutes(mode) for mode, key in _MINUTE_KEYS.items()}
        return cls(
            auto_switch=policy.auto_switch,
            sound_enabled=policy.sound_enabled,
            animations_enabled=policy.animations_enabled,
            **minutes,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def durations(self) -> Dict[IntervalMode, int]:
        return {mode: getattr(self, key) for mode, key in _MINUTE_KEYS.items()}

    def policy(self) -> EnginePolicy:
        return EnginePolicy(
            auto_switch=self.auto_switch,
            sound_enabled=self.sound_enabled,
            animations_enabled=self.animations_enabled,
        )

    def merged(self, patch: Mapping[str, Any]) -> "SettingsSnapshot":
        data = self.to_dict()
        data.update({k: v for k, v in patch.items() if k in DEFAULTS})
        return SettingsSnapshot.from_dict(data)


class SettingsStore:

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> SettingsSnapshot:
        if not self.path.exists():
            return SettingsSnapshot()
        try:
            saved = json.loads(self.path.read_text())
            if not isinstance(saved, dict):
                raise ValueError("settings file does not hold an object")
        except (OSError, ValueError) as exc:
            logger.warning("could not read %s, using defaults: %s", self.path, exc)
            return SettingsSnapshot()
        # a zero or empty duration in the file means "use the default"
        for key in _MINUTE_KEYS.values():
            if key in saved and not saved[key]:
                del saved[key]
        return SettingsSnapshot.from_dict(saved)

    def save(self, snapshot: SettingsSnapshot) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(snapshot.to_dict(), indent=2))
            return True
        except OSError as exc:
            logger.warning("could not persist settings to %s: %s", self.path, exc)
            return False
