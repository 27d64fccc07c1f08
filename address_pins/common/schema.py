"""Minimal strict schema for YAML config validation."""

from __future__ import annotations

from address_pins.common.errors import ConfigError

GEOCODING_PROVIDERS = {"nominatim", "static"}


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_positive_number(value, ctx: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{ctx} must be a positive number")


def validate_app_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    top_required = {"storage", "geocoding", "map", "logging"}
    top_known = top_required | {"location"}
    _assert_required_keys(cfg, top_required, "app config")
    _assert_no_unknown_keys(cfg, top_known, "app config", allow_unknown)

    _assert_required_keys(cfg["storage"], {"data_dir", "filename", "key"}, "storage")

    geocoding = cfg["geocoding"]
    _assert_required_keys(geocoding, {"provider"}, "geocoding")
    _assert_no_unknown_keys(
        geocoding,
        {
            "provider",
            "endpoint",
            "limit",
            "country_codes",
            "include_house_number",
            "timeout_seconds",
            "rate_per_sec",
            "static_results",
        },
        "geocoding",
        allow_unknown,
    )
    if geocoding["provider"] not in GEOCODING_PROVIDERS:
        raise ConfigError(f"Unsupported geocoding provider: {geocoding['provider']}")
    if geocoding["provider"] == "nominatim":
        _assert_required_keys(geocoding, {"endpoint"}, "geocoding")
    for key in ("limit", "timeout_seconds", "rate_per_sec"):
        if key in geocoding:
            _assert_positive_number(geocoding[key], f"geocoding.{key}")
    static_results = geocoding.get("static_results") or {}
    if not isinstance(static_results, dict):
        raise ConfigError("geocoding.static_results must be a mapping")
    for address, candidates in static_results.items():
        if not isinstance(candidates, list):
            raise ConfigError(f"geocoding.static_results[{address!r}] must be a list")
        for idx, candidate in enumerate(candidates):
            _assert_required_keys(candidate, {"latitude", "longitude"}, f"static_results[{address!r}][{idx}]")

    _assert_required_keys(cfg["map"], {"zoom_delta"}, "map")
    _assert_positive_number(cfg["map"]["zoom_delta"], "map.zoom_delta")

    location = cfg.get("location")
    if location is not None:
        _assert_required_keys(location, {"latitude", "longitude"}, "location")

    _assert_required_keys(cfg["logging"], {"level"}, "logging")

    return cfg
