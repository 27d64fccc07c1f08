"""File-backed string key-value storage.

The whole store is one JSON object mapping keys to string values, the same
shape a device's async key-value storage exposes. Every write rewrites the file
atomically.
"""

from __future__ import annotations

import json
from pathlib import Path

from address_pins.common.errors import StoreCorruptError, StoreWriteError
from address_pins.common.fs import read_json, write_json_atomic


class KeyValueStore:
    def __init__(self, path: Path) -> None:
        self.path = path

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            payload = read_json(self.path)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise StoreCorruptError(f"Unreadable storage file {self.path}: {exc}") from exc
        if not isinstance(payload, dict):
            raise StoreCorruptError(f"Storage file {self.path} does not hold an object")
        return payload

    def _write_all(self, payload: dict[str, str]) -> None:
        try:
            write_json_atomic(self.path, payload)
        except (OSError, TypeError, ValueError) as exc:
            raise StoreWriteError(f"Could not write storage file {self.path}: {exc}") from exc

    def get_item(self, key: str) -> str | None:
        value = self._read_all().get(key)
        if value is not None and not isinstance(value, str):
            raise StoreCorruptError(f"Stored value for {key!r} is not a string")
        return value

    def set_item(self, key: str, value: str) -> None:
        try:
            current = self._read_all()
        except StoreCorruptError as exc:
            # Rewriting would drop every other key in the file.
            raise StoreWriteError(f"Refusing to overwrite unreadable storage file {self.path}") from exc
        current[key] = value
        self._write_all(current)

    def remove_item(self, key: str) -> None:
        current = self._read_all()
        if key in current:
            del current[key]
            self._write_all(current)
