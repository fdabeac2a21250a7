"""Single-file JSON persistence with atomic whole-record replacement."""

from __future__ import annotations

import asyncio
import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Optional

from peerdraft.core.exceptions import StorageError
from peerdraft.core.logger import get_logger

logger = get_logger(__name__)


class JsonFileDataStore:
    """Persist the settings record as one JSON document on disk."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def load_data(self) -> Optional[dict[str, Any]]:
        return await asyncio.to_thread(self._read)

    async def save_data(self, record: Mapping[str, Any]) -> None:
        await asyncio.to_thread(self._write, dict(record))

    def _read(self) -> Optional[dict[str, Any]]:
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageError(f"Cannot read settings from {self._path}: {exc}") from exc
        try:
            payload = json.loads(raw.decode("utf-8"))
        except ValueError as exc:
            self._set_aside(f"invalid JSON ({exc})")
            return None
        if not isinstance(payload, dict):
            self._set_aside("root is not an object")
            return None
        return payload

    def _set_aside(self, reason: str) -> Path:
        """Move an unusable settings file out of the way so its bytes are never overwritten."""
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        backup = self._path.with_name(f"{self._path.name}.corrupt-{stamp}")
        try:
            os.replace(self._path, backup)
        except OSError as exc:
            raise StorageError(f"Cannot move unreadable settings {self._path} aside: {exc}") from exc
        logger.warning("Settings file %s is unusable (%s); kept as %s", self._path, reason, backup)
        return backup

    def _write(self, record: dict[str, Any]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
        except OSError as exc:
            raise StorageError(f"Cannot write settings to {self._path}: {exc}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(record, handle, ensure_ascii=False, indent=2)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
        except (OSError, TypeError, ValueError) as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"Cannot write settings to {self._path}: {exc}") from exc
