"""Whole-collection persistence of user records.

There is no append or per-record update: callers load the full collection,
mutate their copy and save it back. Two interleaved read-modify-write cycles
lose one of the mutations (last write wins).
"""

from __future__ import annotations

import json
import logging
from typing import Iterable

from address_pins.common.constants import STORAGE_KEY
from address_pins.common.errors import StoreCorruptError, StoreWriteError
from address_pins.common.logging import get_logger, log_event
from address_pins.common.models import UserRecord
from address_pins.storage.key_value import KeyValueStore


def serialize_records(records: Iterable[UserRecord]) -> str:
    return json.dumps([record.to_dict() for record in records], ensure_ascii=False)


def deserialize_records(raw: str) -> list[UserRecord]:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise StoreCorruptError(f"Stored users are not valid JSON: {exc}") from exc
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise StoreCorruptError("Stored users are not a JSON array")

    records: list[UserRecord] = []
    for idx, item in enumerate(payload):
        try:
            records.append(UserRecord.from_dict(item))
        except ValueError as exc:
            raise StoreCorruptError(f"Stored user #{idx} is malformed: {exc}") from exc
    return records


class RecordStore:
    def __init__(
        self,
        backend: KeyValueStore,
        *,
        key: str = STORAGE_KEY,
        logger: logging.Logger | None = None,
    ) -> None:
        self.backend = backend
        self.key = key
        self.logger = logger or get_logger()

    def load(self) -> list[UserRecord]:
        try:
            raw = self.backend.get_item(self.key)
            records = [] if raw is None else deserialize_records(raw)
        except StoreCorruptError as exc:
            log_event(
                self.logger,
                str(exc),
                level=logging.WARNING,
                component="store",
                event="STORE_CORRUPT",
                status="error",
                error_code=exc.error_code,
            )
            raise
        log_event(self.logger, "loaded users", component="store", event="STORE_LOAD", status="ok", record_count=len(records))
        return records

    def save(self, records: list[UserRecord]) -> None:
        try:
            self.backend.set_item(self.key, serialize_records(records))
        except StoreWriteError as exc:
            log_event(
                self.logger,
                str(exc),
                level=logging.ERROR,
                component="store",
                event="STORE_WRITE_FAIL",
                status="error",
                error_code=exc.error_code,
            )
            raise
        log_event(self.logger, "saved users", component="store", event="STORE_SAVE", status="ok", record_count=len(records))
