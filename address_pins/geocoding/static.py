"""Offline geocoder backed by a fixed address table."""

from __future__ import annotations

from address_pins.common.models import Coordinate
from address_pins.common.text import normalize_text


def _key(address_line: str) -> str:
    return " ".join(normalize_text(address_line).casefold().split())


class StaticGeocoder:
    def __init__(self, results: dict[str, list[Coordinate]] | None = None) -> None:
        self.results = {_key(address): list(candidates) for address, candidates in (results or {}).items()}

    def geocode(self, address_line: str) -> list[Coordinate]:
        return list(self.results.get(_key(address_line), []))
