"""Device position collaborators."""

from __future__ import annotations

from typing import Protocol

from address_pins.common.errors import LocationError
from address_pins.common.models import Coordinate

MESSAGE_NO_POSITION = "Permissão de localização negada ou posição indisponível."


class LocationProvider(Protocol):
    def current_position(self) -> Coordinate:
        """Return the device position or raise LocationError."""
        ...


class StaticLocationProvider:
    def __init__(self, position: Coordinate | None, error_message: str = MESSAGE_NO_POSITION) -> None:
        self.position = position
        self.error_message = error_message

    def current_position(self) -> Coordinate:
        if self.position is None:
            raise LocationError(self.error_message)
        return self.position
