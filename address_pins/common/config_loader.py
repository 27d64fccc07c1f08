"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from address_pins.common.constants import DEFAULT_ZOOM_DELTA, STORAGE_KEY
from address_pins.common.errors import ConfigError
from address_pins.common.fs import read_yaml
from address_pins.common.models import Coordinate, safe_float, valid_lat_lon
from address_pins.common.schema import validate_app_config

DEFAULT_CONFIG_PATH = Path("config") / "app.yml"


@dataclass(frozen=True)
class StorageConfig:
    data_dir: Path
    filename: str = "storage.json"
    key: str = STORAGE_KEY

    @property
    def path(self) -> Path:
        return self.data_dir / self.filename


@dataclass(frozen=True)
class GeocodingConfig:
    provider: str
    endpoint: str | None = None
    limit: int = 1
    country_codes: str | None = None
    include_house_number: bool = False
    timeout_seconds: float = 30.0
    rate_per_sec: float = 1.0
    static_results: dict[str, list[Coordinate]] | None = None


@dataclass(frozen=True)
class AppConfig:
    storage: StorageConfig
    geocoding: GeocodingConfig
    zoom_delta: float
    location: Coordinate | None
    log_level: str


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    base = read_yaml(path) or {}
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path) or {}
    return _deep_merge(base, overlay)


def _coordinate(raw: dict, ctx: str) -> Coordinate:
    lat = safe_float(raw.get("latitude"))
    lon = safe_float(raw.get("longitude"))
    if not valid_lat_lon(lat, lon):
        raise ConfigError(f"{ctx} has invalid coordinates")
    return Coordinate(latitude=lat, longitude=lon)


def build_app_config(cfg: dict, *, data_dir_override: Path | None = None) -> AppConfig:
    storage_cfg = cfg["storage"]
    geocoding_cfg = cfg["geocoding"]

    static_results = {
        address: [_coordinate(c, f"static_results[{address!r}]") for c in candidates]
        for address, candidates in (geocoding_cfg.get("static_results") or {}).items()
    }

    location = None
    if cfg.get("location") is not None:
        location = _coordinate(cfg["location"], "location")

    return AppConfig(
        storage=StorageConfig(
            data_dir=data_dir_override or Path(storage_cfg["data_dir"]),
            filename=storage_cfg["filename"],
            key=storage_cfg["key"],
        ),
        geocoding=GeocodingConfig(
            provider=geocoding_cfg["provider"],
            endpoint=geocoding_cfg.get("endpoint"),
            limit=int(geocoding_cfg.get("limit", 1)),
            country_codes=geocoding_cfg.get("country_codes"),
            include_house_number=bool(geocoding_cfg.get("include_house_number", False)),
            timeout_seconds=float(geocoding_cfg.get("timeout_seconds", 30.0)),
            rate_per_sec=float(geocoding_cfg.get("rate_per_sec", 1.0)),
            static_results=static_results,
        ),
        zoom_delta=float(cfg["map"].get("zoom_delta", DEFAULT_ZOOM_DELTA)),
        location=location,
        log_level=str(cfg["logging"]["level"]),
    )


def load_app_config(
    config_path: Path = DEFAULT_CONFIG_PATH,
    *,
    overlay_path: Path | None = None,
    data_dir_override: Path | None = None,
    allow_unknown: bool = False,
) -> AppConfig:
    raw = _load_yaml_with_overlay(config_path, overlay_path)
    validated = validate_app_config(raw, allow_unknown=allow_unknown)
    return build_app_config(validated, data_dir_override=data_dir_override)
