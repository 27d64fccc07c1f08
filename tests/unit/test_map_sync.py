from __future__ import annotations

from pathlib import Path

import pytest

from address_pins.common.errors import StoreWriteError
from address_pins.common.models import Coordinate, Marker, Region, UserRecord
from address_pins.flows.deletion import remove_at
from address_pins.flows.events import FocusEvents
from address_pins.flows.location import StaticLocationProvider
from address_pins.flows.map_sync import MapSyncController
from address_pins.storage.key_value import KeyValueStore
from address_pins.storage.record_store import RecordStore

A = UserRecord("A", "Rua A", "1", "Recife", "PE", -8.05, -34.9)
B = UserRecord("B", "Rua B", "2", "Natal", "RN", -5.79, -35.2)
C = UserRecord("C", "Rua C", "3", "Belém", "PA", -1.45, -48.5)


def _controller(tmp_path: Path, records=None, position=Coordinate(-23.55, -46.63)):
    store = RecordStore(KeyValueStore(tmp_path / "storage.json"))
    if records is not None:
        store.save(records)
    events = FocusEvents()
    controller = MapSyncController(store, events, StaticLocationProvider(position))
    return controller, store, events


def test_mount_loads_records_and_sets_initial_region(tmp_path: Path):
    controller, _store, events = _controller(tmp_path, [A, B])

    controller.mount()

    assert controller.records == [A, B]
    assert controller.region == Region(-23.55, -46.63, 0.01, 0.01)
    assert controller.device_marker.title == "Você está aqui"
    assert events.listener_count == 1


def test_mount_without_position_reports_error(tmp_path: Path):
    controller, _store, _events = _controller(tmp_path, [A], position=None)

    controller.mount()

    assert controller.location_error
    assert controller.device_marker is None
    assert controller.region is None
    assert controller.records == [A]


def test_focus_event_reloads_wholesale(tmp_path: Path):
    controller, store, events = _controller(tmp_path, [A])
    controller.mount()

    store.save([B, C])
    events.emit()

    assert controller.records == [B, C]


def test_reload_twice_yields_identical_markers(tmp_path: Path):
    controller, _store, _events = _controller(tmp_path, [A, B, C])

    controller.reload()
    first = controller.markers
    controller.reload()

    assert controller.markers == first
    assert first[1] == Marker(-5.79, -35.2, "B", "Rua B, 2")


def test_corrupt_store_degrades_to_no_markers(tmp_path: Path):
    controller, store, _events = _controller(tmp_path)
    store.backend.set_item("users", "[{]")

    controller.mount()

    assert controller.markers == []
    assert controller.last_error


def test_unmount_stops_reloading(tmp_path: Path):
    controller, store, events = _controller(tmp_path, [A])
    controller.mount()
    controller.unmount()

    store.save([])
    events.emit()

    assert controller.records == [A]
    assert events.listener_count == 0


def test_focus_on_sets_fixed_delta_region(tmp_path: Path):
    controller, _store, _events = _controller(tmp_path, [A, B])
    controller.mount()

    assert controller.focus_on(-5.0, -35.0) is None
    assert controller.region == Region(-5.0, -35.0, 0.01, 0.01)

    controller.focus_on_record(1)
    assert controller.region == Region(B.latitude, B.longitude, 0.01, 0.01)


def test_delete_first_of_three(tmp_path: Path):
    controller, store, _events = _controller(tmp_path, [A, B, C])
    controller.mount()

    assert controller.delete_at(0) is True

    assert controller.records == [B, C]
    assert store.load() == [B, C]


def test_delete_out_of_range_is_index_error(tmp_path: Path):
    controller, store, _events = _controller(tmp_path, [A])
    controller.mount()

    with pytest.raises(IndexError):
        controller.delete_at(1)
    with pytest.raises(IndexError):
        controller.delete_at(-1)
    assert store.load() == [A]


def test_delete_save_failure_reported_locally(tmp_path: Path, monkeypatch):
    controller, store, events = _controller(tmp_path, [A, B])
    controller.mount()

    def fail(_records):
        raise StoreWriteError("disk full")

    monkeypatch.setattr(store, "save", fail)

    assert controller.delete_at(0) is False
    assert controller.records == [B]
    assert "disk full" in controller.last_error

    monkeypatch.undo()
    events.emit()
    assert controller.records == [A, B]


def test_remove_at_returns_new_list():
    records = [A, B, C]

    assert remove_at(records, 1) == [A, C]
    assert records == [A, B, C]


def test_focus_events_unsubscribe_is_idempotent():
    events = FocusEvents()
    calls = []
    unsubscribe = events.add_listener(lambda: calls.append(1))

    events.emit()
    unsubscribe()
    unsubscribe()
    events.emit()

    assert calls == [1]
