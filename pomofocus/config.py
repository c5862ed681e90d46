"""
Central configuration for the Pomofocus timer service.

Precedence, lowest first: field defaults, a local config.json, then POMO_*
environment variables. Both sources go through the same type coercion so a
port given as "9100" or 9100 ends up an int either way.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

_ROOT = Path(__file__).parent.parent
_CONFIG_FILE = _ROOT / "config.json"
ENV_PREFIX = "POMO_"


def _coerce(current: Any, raw: Any) -> Any:
    if isinstance(current, bool):
        if isinstance(raw, str):
            return raw.strip().lower() in ("1", "true", "yes", "on")
        return bool(raw)
    if isinstance(current, Path):
        return Path(raw)
    return type(current)(raw)


def _read_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text())
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


@dataclass
class Config:
    # API
    api_host: str = "127.0.0.1"
    api_port: int = 8765

    # Timer
    tick_interval_s: float = 1.0             # countdown resolution
    projection_refresh_s: int = 60           # finish-time refresh while running

    # Storage
    data_dir: Path = field(default_factory=lambda: _ROOT / "data")
    settings_file: str = "settings.json"

    # Notifications
    desktop_notifications: bool = False

    # Logging
    log_level: str = "info"

    @property
    def settings_path(self) -> Path:
        return self.data_dir / self.settings_file

    def override(self, values: Mapping[str, Any]) -> None:
        """Apply known keys from *values*, coerced to each field's type."""
        for f in fields(self):
            if f.name not in values:
                continue
            try:
                setattr(self, f.name, _coerce(getattr(self, f.name), values[f.name]))
            except (TypeError, ValueError):
                logger.warning("ignoring invalid config %s=%r", f.name, values[f.name])

    @classmethod
    def load(
        cls,
        config_file: Path = _CONFIG_FILE,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "Config":
        environ = os.environ if environ is None else environ
        cfg = cls()
        cfg.override(_read_file(config_file))
        cfg.override({
            k[len(ENV_PREFIX):].lower(): v
            for k, v in environ.items()
            if k.startswith(ENV_PREFIX)
        })
        cfg.data_dir.mkdir(parents=True, exist_ok=True)
        return cfg


# Module-level singleton
config = Config.load()
