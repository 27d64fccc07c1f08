"""Geocoder construction from application config."""

from __future__ import annotations

import logging

from address_pins.common.config_loader import GeocodingConfig
from address_pins.common.errors import ConfigError
from address_pins.common.http import HttpClient, TimeoutConfig
from address_pins.geocoding.base import Geocoder
from address_pins.geocoding.nominatim import DEFAULT_ENDPOINT, NominatimGeocoder
from address_pins.geocoding.static import StaticGeocoder


def build_http_client(config: GeocodingConfig) -> HttpClient:
    return HttpClient(
        timeout=TimeoutConfig(connect=min(10.0, config.timeout_seconds), read=config.timeout_seconds),
        rate_per_sec=config.rate_per_sec,
    )


def build_geocoder(
    config: GeocodingConfig,
    http_client: HttpClient | None = None,
    logger: logging.Logger | None = None,
) -> Geocoder:
    if config.provider == "static":
        return StaticGeocoder(config.static_results)
    if config.provider == "nominatim":
        return NominatimGeocoder(
            http_client or build_http_client(config),
            endpoint=config.endpoint or DEFAULT_ENDPOINT,
            limit=config.limit,
            country_codes=config.country_codes,
            logger=logger,
        )
    raise ConfigError(f"Unsupported geocoding provider: {config.provider}")
