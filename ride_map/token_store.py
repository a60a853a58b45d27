"""Single-record persistence for the Strava credential."""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from .config import TOKEN_FILE

LOGGER = logging.getLogger(__name__)

__all__ = ["TokenStore", "JsonFileTokenStore", "MemoryTokenStore"]


class TokenStore(Protocol):
    """Read/replace access to the one stored token record."""

    def load(self) -> Optional[Dict[str, Any]]:
        """Return the stored record, or ``None`` when absent or unreadable."""

    def save(self, record: Dict[str, Any]) -> None:
        """Create or replace the stored record."""


class JsonFileTokenStore:
    """Token record kept as a JSON document on disk.

    Writes go to a sibling temp file which is then renamed over the target, so
    readers never observe a half-written record.
    """

    def __init__(self, path: str | Path = TOKEN_FILE) -> None:
        base = Path(path)
        self._path = base if base.is_absolute() else Path.cwd() / base
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[Dict[str, Any]]:
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            LOGGER.error("Failed reading token file %s: %s", self._path, exc)
            return None
        if not isinstance(payload, dict):
            LOGGER.error(
                "Token file %s holds %s, expected an object",
                self._path,
                type(payload).__name__,
            )
            return None
        return payload

    def save(self, record: Dict[str, Any]) -> None:
        with self._lock:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            temp_path = self._path.with_suffix(".tmp")
            with temp_path.open("w", encoding="utf-8") as handle:
                json.dump(record, handle, ensure_ascii=True, indent=2)
            temp_path.replace(self._path)
        LOGGER.info("Token saved to %s", self._path)


class MemoryTokenStore:
    """In-process token record, handy for tests and one-shot CLI runs."""

    def __init__(self, record: Optional[Dict[str, Any]] = None) -> None:
        self._record = dict(record) if record is not None else None
        self._lock = threading.Lock()

    def load(self) -> Optional[Dict[str, Any]]:
        with self._lock:
            return dict(self._record) if self._record is not None else None

    def save(self, record: Dict[str, Any]) -> None:
        with self._lock:
            self._record = dict(record)
