# src/taskpulse/storage/kv_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
import threading
from pathlib import Path

logger = logging.getLogger(__name__)


class JsonFileKVStore:
    """
    Local key-value string store backed by one JSON object file.

    Plays the role of browser local storage: every key maps to a string.
    Writes go to a temp file first and are swapped in with os.replace, so a
    crash mid-write never leaves a half-written file behind.

    Failures are reported, not raised:
    - unreadable/corrupt file -> read_string returns None
    - failed write -> write_string returns False
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        data = json.loads(self._path.read_text("utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"storage file must hold a JSON object: {self._path}")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def read_string(self, key: str) -> str | None:
        with self._lock:
            try:
                return self._read_all().get(key)
            except Exception:
                logger.exception("Failed to read storage file %s", self._path)
                return None

    def write_string(self, key: str, value: str) -> bool:
        with self._lock:
            try:
                try:
                    data = self._read_all()
                except (ValueError, OSError):
                    # Unreadable file: keep our key rather than refusing to save.
                    logger.warning("Storage file %s unreadable; rewriting it.", self._path)
                    data = {}
                data[key] = value

                self._path.parent.mkdir(parents=True, exist_ok=True)
                tmp = self._path.with_suffix(".tmp")
                tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), "utf-8")
                os.replace(tmp, self._path)
                with contextlib.suppress(Exception):
                    os.chmod(self._path, 0o600)
                return True
            except Exception:
                logger.exception("Failed to write storage file %s", self._path)
                return False


class MemoryKVStore:
    """In-process key-value store (no durability). Used when no data dir is wanted."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def read_string(self, key: str) -> str | None:
        return self.data.get(key)

    def write_string(self, key: str, value: str) -> bool:
        self.data[key] = value
        return True
