"""CLI entrypoint for the address pins map."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from pathlib import Path

from address_pins.common.config_loader import DEFAULT_CONFIG_PATH, AppConfig, load_app_config
from address_pins.common.constants import EXIT_HARD_FAIL, EXIT_SUCCESS, EXIT_USER_ERROR
from address_pins.common.errors import AddressPinsError, GeocodeServiceError
from address_pins.common.logging import build_logger, log_event
from address_pins.common.models import FormFields
from address_pins.common.text import normalize_text
from address_pins.common.time_utils import generate_session_id
from address_pins.flows.events import FocusEvents
from address_pins.flows.location import StaticLocationProvider
from address_pins.flows.map_sync import MapSyncController
from address_pins.flows.registration import RegistrationWorkflow
from address_pins.geocoding.base import Geocoder
from address_pins.common.http import HttpClient
from address_pins.geocoding.factory import build_geocoder, build_http_client
from address_pins.storage.key_value import KeyValueStore
from address_pins.storage.record_store import RecordStore


@dataclass
class Components:
    config: AppConfig
    store: RecordStore
    geocoder: Geocoder
    focus_events: FocusEvents
    map_controller: MapSyncController
    http_client: HttpClient | None = None


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--config", default=str(DEFAULT_CONFIG_PATH))
    parser.add_argument("--overlay-config", default=None)
    parser.add_argument("--data-dir", default=None)
    parser.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    sub = parser.add_subparsers(dest="command", required=True)

    register = sub.add_parser("register", help="geocode an address and store it")
    register.add_argument("--name", default="")
    register.add_argument("--street", default="")
    register.add_argument("--number", default="")
    register.add_argument("--city", default="")
    register.add_argument("--state", default="")

    sub.add_parser("list", help="print the map markers")

    delete = sub.add_parser("delete", help="delete a record by position")
    delete.add_argument("index", type=int)

    focus = sub.add_parser("focus", help="print the camera region centred on a record")
    focus.add_argument("index", type=int)

    geocode = sub.add_parser("geocode", help="resolve an address without storing it")
    geocode.add_argument("address")

    return parser.parse_args(argv)


def build_components(config: AppConfig, logger) -> Components:
    store = RecordStore(KeyValueStore(config.storage.path), key=config.storage.key, logger=logger)
    http_client = build_http_client(config.geocoding) if config.geocoding.provider == "nominatim" else None
    geocoder = build_geocoder(config.geocoding, http_client=http_client, logger=logger)
    focus_events = FocusEvents()
    controller = MapSyncController(
        store,
        focus_events,
        StaticLocationProvider(config.location),
        zoom_delta=config.zoom_delta,
        logger=logger,
    )
    return Components(
        config=config,
        store=store,
        geocoder=geocoder,
        focus_events=focus_events,
        map_controller=controller,
        http_client=http_client,
    )


def _emit(payload) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _marker_payload(controller: MapSyncController) -> dict:
    device = controller.device_marker
    return {
        "region": controller.region.to_dict() if controller.region else None,
        "location_error": controller.location_error,
        "device": device.to_dict() if device else None,
        "markers": [marker.to_dict() for marker in controller.markers],
    }


def execute_command(args: argparse.Namespace, components: Components) -> int:
    controller = components.map_controller

    if args.command == "register":
        form = FormFields(
            name=args.name,
            street=args.street,
            number=args.number,
            city=args.city,
            state=args.state,
        )
        controller.mount()
        workflow = RegistrationWorkflow(
            components.geocoder,
            components.store,
            # Returning to the map re-activates it.
            on_done=lambda _record: components.focus_events.emit(),
            include_house_number=components.config.geocoding.include_house_number,
            logger=controller.logger,
        )
        outcome = workflow.submit(form)
        if not outcome.ok:
            _emit({"status": outcome.state.value, "message": outcome.message})
            return EXIT_USER_ERROR
        _emit({"status": outcome.state.value, "record": outcome.record.to_dict(), "marker_count": len(controller.markers)})
        return EXIT_SUCCESS

    if args.command == "list":
        controller.mount()
        _emit(_marker_payload(controller))
        return EXIT_SUCCESS

    if args.command == "delete":
        controller.mount()
        if not 0 <= args.index < len(controller.records):
            _emit({"status": "error", "message": f"No record at position {args.index}"})
            return EXIT_USER_ERROR
        if not controller.delete_at(args.index):
            _emit({"status": "error", "message": controller.last_error})
            return EXIT_USER_ERROR
        _emit({"status": "ok", "remaining": len(controller.records)})
        return EXIT_SUCCESS

    if args.command == "focus":
        controller.mount()
        if not 0 <= args.index < len(controller.records):
            _emit({"status": "error", "message": f"No record at position {args.index}"})
            return EXIT_USER_ERROR
        controller.focus_on_record(args.index)
        _emit({"status": "ok", "region": controller.region.to_dict()})
        return EXIT_SUCCESS

    if args.command == "geocode":
        query = normalize_text(args.address)
        try:
            candidates = components.geocoder.geocode(query)
        except GeocodeServiceError as exc:
            _emit({"status": "error", "query": query, "message": str(exc)})
            return EXIT_USER_ERROR
        _emit(
            {
                "status": "ok" if candidates else "no_match",
                "query": query,
                "candidates": [{"latitude": c.latitude, "longitude": c.longitude} for c in candidates],
            }
        )
        return EXIT_SUCCESS if candidates else EXIT_USER_ERROR

    raise ValueError(f"Unknown command: {args.command}")


def run_command(args: argparse.Namespace) -> int:
    session_id = generate_session_id()
    config = load_app_config(
        Path(args.config),
        overlay_path=Path(args.overlay_config) if args.overlay_config else None,
        data_dir_override=Path(args.data_dir) if args.data_dir else None,
    )
    logger = build_logger(session_id, data_dir=config.storage.data_dir, level=args.log_level or config.log_level)
    components = build_components(config, logger)

    log_event(logger, f"{args.command} start", session_id=session_id, component="cli", event="COMMAND_START", status="ok")
    try:
        return execute_command(args, components)
    except AddressPinsError as exc:
        log_event(
            logger,
            f"{args.command} failed: {exc}",
            session_id=session_id,
            component="cli",
            event="COMMAND_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        return EXIT_HARD_FAIL
    finally:
        components.map_controller.unmount()
        if components.http_client is not None:
            components.http_client.close()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except AddressPinsError as exc:
        print(f"{exc.error_code}: {exc}", file=sys.stderr)
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
