"""Nominatim (OpenStreetMap) search backend."""

from __future__ import annotations

import logging
from typing import Any

from address_pins.common.errors import GeocodeServiceError
from address_pins.common.http import HttpClient, HttpRequestError
from address_pins.common.logging import get_logger, log_event
from address_pins.common.models import Coordinate, safe_float, valid_lat_lon

DEFAULT_ENDPOINT = "https://nominatim.openstreetmap.org/search"


def build_search_params(address_line: str, *, limit: int, country_codes: str | None) -> dict[str, Any]:
    params: dict[str, Any] = {
        "q": address_line,
        "format": "jsonv2",
        "limit": limit,
        "addressdetails": 0,
    }
    if country_codes:
        params["countrycodes"] = country_codes
    return params


def parse_candidates(payload: Any) -> list[Coordinate]:
    if not isinstance(payload, list):
        raise GeocodeServiceError(f"Unexpected Nominatim payload type: {type(payload).__name__}")

    candidates: list[Coordinate] = []
    for item in payload:
        if not isinstance(item, dict):
            continue
        lat = safe_float(item.get("lat"))
        lon = safe_float(item.get("lon"))
        if not valid_lat_lon(lat, lon):
            continue
        candidates.append(Coordinate(latitude=lat, longitude=lon))
    return candidates


class NominatimGeocoder:
    def __init__(
        self,
        http_client: HttpClient,
        *,
        endpoint: str = DEFAULT_ENDPOINT,
        limit: int = 1,
        country_codes: str | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.http_client = http_client
        self.endpoint = endpoint
        self.limit = limit
        self.country_codes = country_codes
        self.logger = logger or get_logger()

    def geocode(self, address_line: str) -> list[Coordinate]:
        params = build_search_params(address_line, limit=self.limit, country_codes=self.country_codes)
        log_event(self.logger, f"geocoding {address_line!r}", component="geocoder", event="GEOCODE_REQUEST", status="ok")
        try:
            payload = self.http_client.get_json(self.endpoint, params=params)
        except HttpRequestError as exc:
            log_event(
                self.logger,
                f"geocoding failed: {exc}",
                level=logging.WARNING,
                component="geocoder",
                event="GEOCODE_FAIL",
                status="error",
                error_code=exc.error_code,
            )
            raise GeocodeServiceError(str(exc)) from exc

        candidates = parse_candidates(payload)
        log_event(
            self.logger,
            f"geocoding returned {len(candidates)} candidate(s)",
            component="geocoder",
            event="GEOCODE_RESULT",
            status="ok",
            record_count=len(candidates),
        )
        return candidates
