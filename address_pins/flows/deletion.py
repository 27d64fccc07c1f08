"""Positional removal from a record collection."""

from __future__ import annotations

from address_pins.common.models import UserRecord


def remove_at(records: list[UserRecord], index: int) -> list[UserRecord]:
    """Return a new list without the element at ``index``.

    Negative and past-the-end indexes are caller bugs and raise IndexError.
    """
    if not 0 <= index < len(records):
        raise IndexError(f"Record index {index} out of range for {len(records)} record(s)")
    return records[:index] + records[index + 1 :]
