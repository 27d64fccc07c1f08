"""Geocoder contract shared by every backend."""

from __future__ import annotations

from typing import Protocol

from address_pins.common.models import Coordinate


class Geocoder(Protocol):
    def geocode(self, address_line: str) -> list[Coordinate]:
        """Resolve an address line to ordered candidates.

        An empty list means no match. Backend failures raise GeocodeServiceError.
        """
        ...
