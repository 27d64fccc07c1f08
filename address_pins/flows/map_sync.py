"""Keep the map's marker set in step with the persisted collection.

The collection is reloaded wholesale on mount and on every focus event; there
is no push channel from the registration flow.
"""

from __future__ import annotations

import logging
from typing import Callable

from address_pins.common.constants import DEFAULT_ZOOM_DELTA
from address_pins.common.errors import LocationError, StoreError
from address_pins.common.logging import get_logger, log_event
from address_pins.common.models import Coordinate, Marker, Region, UserRecord
from address_pins.flows.deletion import remove_at
from address_pins.flows.events import FocusEvents
from address_pins.flows.location import LocationProvider
from address_pins.storage.record_store import RecordStore


class MapSyncController:
    def __init__(
        self,
        store: RecordStore,
        focus_events: FocusEvents,
        location_provider: LocationProvider,
        *,
        zoom_delta: float = DEFAULT_ZOOM_DELTA,
        logger: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.focus_events = focus_events
        self.location_provider = location_provider
        self.zoom_delta = zoom_delta
        self.logger = logger or get_logger()

        self.records: list[UserRecord] = []
        self.position: Coordinate | None = None
        self.location_error: str | None = None
        self.region: Region | None = None
        self.last_error: str | None = None
        self._unsubscribe: Callable[[], None] | None = None

    def mount(self) -> None:
        self._locate()
        self.reload()
        if self._unsubscribe is None:
            self._unsubscribe = self.focus_events.add_listener(self.reload)

    def unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _locate(self) -> None:
        try:
            self.position = self.location_provider.current_position()
        except LocationError as exc:
            self.position = None
            self.location_error = str(exc)
            log_event(
                self.logger,
                self.location_error,
                level=logging.WARNING,
                component="map",
                event="LOCATION_FAIL",
                status="error",
                error_code=exc.error_code,
            )
            return
        self.location_error = None
        self.region = Region.around(self.position.latitude, self.position.longitude, self.zoom_delta)

    def reload(self) -> list[UserRecord]:
        try:
            self.records = self.store.load()
        except StoreError as exc:
            # The view still renders, just without markers.
            self.records = []
            self.last_error = str(exc)
            log_event(
                self.logger,
                "reload failed, showing no markers",
                level=logging.WARNING,
                component="map",
                event="MAP_RELOAD",
                status="error",
                error_code=exc.error_code,
            )
            return self.records
        self.last_error = None
        log_event(self.logger, "markers reloaded", component="map", event="MAP_RELOAD", status="ok", record_count=len(self.records))
        return self.records

    @property
    def markers(self) -> list[Marker]:
        return [Marker.for_record(record) for record in self.records]

    @property
    def device_marker(self) -> Marker | None:
        if self.position is None:
            return None
        return Marker.for_device(self.position)

    def focus_on(self, latitude: float, longitude: float) -> None:
        self.region = Region.around(latitude, longitude, self.zoom_delta)
        log_event(self.logger, f"camera centred on {latitude}, {longitude}", component="map", event="MAP_FOCUS", status="ok")

    def focus_on_record(self, index: int) -> None:
        record = self.records[index]
        self.focus_on(record.latitude, record.longitude)

    def delete_at(self, index: int) -> bool:
        """Drop the record at ``index`` from the view and persist the rest.

        The in-memory list changes even when the save fails; the next reload
        brings the stored collection back. Returns False on a failed save.
        """
        remaining = remove_at(self.records, index)
        self.records = remaining
        try:
            self.store.save(remaining)
        except StoreError as exc:
            self.last_error = str(exc)
            log_event(
                self.logger,
                f"delete of record {index} not persisted",
                level=logging.ERROR,
                component="map",
                event="RECORD_DELETE",
                status="error",
                error_code=exc.error_code,
            )
            return False
        self.last_error = None
        log_event(self.logger, f"deleted record {index}", component="map", event="RECORD_DELETE", status="ok", record_count=len(remaining))
        return True
