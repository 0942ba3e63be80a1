"""
JSON File Storage Implementation

DESIGN DECISION: A single local JSON file is the default backend because:
1. The tracker is single-user and local-only
2. No database setup required
3. Users can inspect or back up their data by copying one file

TRADEOFFS:
- The whole file is rewritten on every write (fine for personal volumes)
- No locking; concurrent writers would race (last write wins)

The file holds one JSON object mapping keys to serialized strings.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from finance_tracker.services.storage.interface import (
    KeyValueStorage,
    StorageReadError,
    StorageWriteError,
)


class JsonFileStorage(KeyValueStorage):
    """
    Key-value storage backed by one JSON document on disk.

    Writes go to a temporary file in the same directory and are then
    moved over the original, so a crash never leaves a half-written file.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageReadError(f"Could not read {self._path}: {e}") from e

        if not raw.strip():
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageReadError(f"Corrupt storage file {self._path}: {e}") from e

        if not isinstance(data, dict):
            raise StorageReadError(
                f"Storage file {self._path} must contain a JSON object"
            )
        return data

    def _write_all(self, data: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(data, fh, indent=2, ensure_ascii=False)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageWriteError(f"Could not write {self._path}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        if value is not None and not isinstance(value, str):
            raise StorageReadError(f"Value for '{key}' is not a serialized string")
        return value

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except StorageReadError:
            # Unreadable file: the next write replaces it.
            data = {}
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> bool:
        data = self._read_all()
        if key not in data:
            return False
        del data[key]
        self._write_all(data)
        return True

    def keys(self) -> list[str]:
        return list(self._read_all().keys())
