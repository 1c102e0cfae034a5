"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger

DEFAULTS: dict[str, Any] = {
    "storage": {
        "data_dir": "~/.trailcam_journal",
        "entries_file": "entries.csv",
        "saved_locations_file": "saved_locations.csv",
        "photos_dir": "photos",
    },
    "logging": {"dir": "logs", "level": "INFO"},
    "photos": {"use_trash": True},
    "stats": {"default_timeframe": "Last 30 days"},
}


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access.

    Values missing from the file fall back to `DEFAULTS`.
    """

    def __init__(self, settings_path: str | Path | None = None) -> None:
        self._path = Path(settings_path) if settings_path else None
        self._data: dict[str, Any] = {}
        if self._path is None:
            return
        if not self._path.exists():
            logger.warning("settings.json not found: {}, using defaults", self._path)
            return
        with self._path.open("r", encoding="utf-8") as f:
            self._data = json.load(f)

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key` from the file, then DEFAULTS, then `default`."""
        for source in (self._data, DEFAULTS):
            found, value = _lookup(source, key)
            if found:
                return value
        return default

    def data_dir(self) -> Path:
        """The storage root; relative values resolve against the settings file's folder."""
        raw = Path(str(self.get("storage.data_dir"))).expanduser()
        if not raw.is_absolute() and self._path is not None:
            raw = self._path.parent / raw
        return raw

    def storage_path(self, key: str) -> Path:
        """Resolve a `storage.*` or `logging.dir` entry under the data dir."""
        p = Path(str(self.get(key))).expanduser()
        return p if p.is_absolute() else self.data_dir() / p


def _lookup(node: Any, key: str) -> tuple[bool, Any]:
    for part in key.split("."):
        if isinstance(node, dict) and part in node:
            node = node[part]
        else:
            return False, None
    return True, node
