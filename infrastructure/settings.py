"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access."""

    def __init__(self, settings_path: str | Path) -> None:
        self._path = Path(settings_path)
        if not self._path.exists():
            raise FileNotFoundError(f"settings.json not found: {self._path}")
        with self._path.open("r", encoding="utf-8") as f:
            self._data = json.load(f)

    @property
    def base_dir(self) -> Path:
        """Directory holding the settings file; relative data paths resolve here."""
        return self._path.parent

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    def get_int(self, key: str, default: int, minimum: int = 1) -> int:
        """Integer setting; falls back to `default` when missing or below `minimum`."""
        raw = self.get(key, default)
        try:
            value = int(raw)
        except (TypeError, ValueError):
            logger.warning("Setting {} is not an integer: {!r}", key, raw)
            return default
        if value < minimum:
            logger.warning("Setting {}={} below minimum {}", key, value, minimum)
            return default
        return value

    def get_path(self, key: str, default: str | None = None) -> Path | None:
        """Path setting resolved against `base_dir`."""
        raw = self.get(key, default)
        if not raw:
            return None
        path = Path(str(raw)).expanduser()
        return path if path.is_absolute() else self.base_dir / path
