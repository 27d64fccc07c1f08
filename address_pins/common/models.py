"""Data models shared by the geocoding, storage and map flows."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from address_pins.common.constants import DEVICE_MARKER_TITLE, RECORD_FIELDS


def safe_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def valid_lat_lon(lat: float | None, lon: float | None) -> bool:
    if lat is None or lon is None:
        return False
    return -90 <= lat <= 90 and -180 <= lon <= 180


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class FormFields:
    name: str = ""
    street: str = ""
    number: str = ""
    city: str = ""
    state: str = ""

    def missing_required(self, required: tuple[str, ...]) -> list[str]:
        return [field for field in required if not str(getattr(self, field) or "").strip()]


@dataclass(frozen=True)
class UserRecord:
    name: str
    street: str
    number: str
    city: str
    state: str
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not valid_lat_lon(self.latitude, self.longitude):
            raise ValueError(f"Coordinates out of range: {self.latitude}, {self.longitude}")

    @classmethod
    def from_form(cls, form: FormFields, coordinate: Coordinate) -> "UserRecord":
        return cls(
            name=form.name,
            street=form.street,
            number=form.number,
            city=form.city,
            state=form.state,
            latitude=coordinate.latitude,
            longitude=coordinate.longitude,
        )

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "UserRecord":
        """Build a record from its persisted shape.

        Raises ValueError when a field is missing or a coordinate is not numeric.
        """
        if not isinstance(payload, dict):
            raise ValueError(f"Expected an object, got {type(payload).__name__}")
        missing = [key for key in RECORD_FIELDS if key not in payload]
        if missing:
            raise ValueError(f"Missing record fields: {', '.join(missing)}")

        lat = safe_float(payload["latitude"])
        lon = safe_float(payload["longitude"])
        if lat is None or lon is None:
            raise ValueError("Record coordinates must be numeric")

        return cls(
            name=_text(payload["nome"]),
            street=_text(payload["rua"]),
            number=_text(payload["numero"]),
            city=_text(payload["cidade"]),
            state=_text(payload["estado"]),
            latitude=lat,
            longitude=lon,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "nome": self.name,
            "rua": self.street,
            "numero": self.number,
            "cidade": self.city,
            "estado": self.state,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


@dataclass(frozen=True)
class Marker:
    latitude: float
    longitude: float
    title: str
    description: str

    @classmethod
    def for_record(cls, record: UserRecord) -> "Marker":
        return cls(
            latitude=record.latitude,
            longitude=record.longitude,
            title=record.name,
            description=f"{record.street}, {record.number}",
        )

    @classmethod
    def for_device(cls, position: Coordinate) -> "Marker":
        return cls(
            latitude=position.latitude,
            longitude=position.longitude,
            title=DEVICE_MARKER_TITLE,
            description="",
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Region:
    latitude: float
    longitude: float
    latitude_delta: float
    longitude_delta: float

    @classmethod
    def around(cls, latitude: float, longitude: float, delta: float) -> "Region":
        return cls(
            latitude=latitude,
            longitude=longitude,
            latitude_delta=delta,
            longitude_delta=delta,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
