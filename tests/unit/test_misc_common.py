import json
import logging
from pathlib import Path

from address_pins.common.fs import read_json, write_json_atomic
from address_pins.common.logging import JsonLineFormatter, build_logger, log_event
from address_pins.common.time_utils import generate_session_id, utc_timestamp_iso


def test_generate_session_id_prefix():
    assert generate_session_id().startswith("session-")


def test_utc_timestamp_is_iso_with_offset():
    assert utc_timestamp_iso().endswith("+00:00")


def test_write_json_atomic_replaces_file_and_leaves_no_temp(tmp_path: Path):
    path = tmp_path / "nested" / "storage.json"

    write_json_atomic(path, {"users": "[]"})
    write_json_atomic(path, {"users": "[1]"})

    assert read_json(path) == {"users": "[1]"}
    assert [p.name for p in path.parent.iterdir()] == ["storage.json"]


def test_json_line_formatter_has_stable_fields():
    record = logging.LogRecord("address_pins", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    record.event = "STORE_SAVE"
    record.record_count = 2

    payload = json.loads(JsonLineFormatter().format(record))

    assert payload["message"] == "hello world"
    assert payload["event"] == "STORE_SAVE"
    assert payload["record_count"] == 2
    assert payload["session_id"] is None
    assert set(payload) >= {"timestamp", "component", "status", "error_code"}


def test_build_logger_writes_jsonl_file(tmp_path: Path):
    logger = build_logger("session-test", data_dir=tmp_path, level="info")

    log_event(logger, "stored", component="store", event="STORE_SAVE", status="ok")
    for handler in logger.handlers:
        handler.flush()

    lines = (tmp_path / "logs" / "session-test.log.jsonl").read_text(encoding="utf-8").splitlines()
    assert json.loads(lines[-1])["component"] == "store"
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
