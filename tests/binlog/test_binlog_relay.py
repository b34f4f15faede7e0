from __future__ import annotations

import threading
from datetime import datetime

from pymysqlreplication.row_event import UpdateRowsEvent, WriteRowsEvent

from src.field_attendance.field_attendance.binlog.relay import BinlogRelay, row_image, row_to_sample
from src.field_attendance.field_attendance.database.connection import DBConfig

DB = DBConfig(host="localhost", port=3306, user="repl", password="secret", database="field_attendance")
TS = datetime(2025, 2, 10, 9, 30, 0)


class RecordingPublisher:
    def __init__(self):
        self.samples = []
        self.published = threading.Event()

    def publish(self, sample):
        self.samples.append(sample)
        self.published.set()
        return 1


def _event(cls, rows):
    # skip packet parsing, rows are given directly
    return type(cls.__name__, (cls,), {"__init__": lambda self: None, "rows": rows})()


def test_row_maps_by_column_name():
    sample = row_to_sample({"id": 5, "user_name": "1234_Asha", "lat": 26.8, "lon": 80.9, "timestamp": TS, "date": TS.date()})

    assert (sample.id, sample.user_name, sample.lat, sample.lon, sample.timestamp) == (5, "1234_Asha", 26.8, 80.9, TS)


def test_row_maps_by_position_when_names_missing():
    values = {
        "UNKNOWN_COL0": 5,
        "UNKNOWN_COL1": "1234_Asha",
        "UNKNOWN_COL2": 26.8,
        "UNKNOWN_COL3": 80.9,
        "UNKNOWN_COL4": "2025-02-10 09:30:00",
        "UNKNOWN_COL5": "2025-02-10",
    }

    sample = row_to_sample(values)

    assert sample.user_name == "1234_Asha"
    assert sample.timestamp == TS


def test_unmappable_rows_are_dropped():
    assert row_to_sample({}) is None
    assert row_to_sample({"id": 1, "user_name": "x", "lat": "north", "lon": 1, "timestamp": TS}) is None
    assert row_to_sample({"id": 1, "user_name": "x", "lat": 1, "lon": 1, "timestamp": None}) is None


def test_update_events_use_after_image():
    row = {
        "before_values": {"id": 1, "user_name": "x", "lat": 1, "lon": 1, "timestamp": TS},
        "after_values": {"id": 1, "user_name": "x", "lat": 2, "lon": 2, "timestamp": TS},
    }

    assert row_image(_event(UpdateRowsEvent, [row]), row)["lat"] == 2


def test_handle_event_publishes_each_mappable_row():
    publisher = RecordingPublisher()
    relay = BinlogRelay(DB, publisher)
    event = _event(
        WriteRowsEvent,
        [
            {"values": {"id": 1, "user_name": "a", "lat": 1, "lon": 1, "timestamp": TS}},
            {"values": {"id": 2, "user_name": "b", "lat": None, "lon": 1, "timestamp": TS}},
        ],
    )

    assert relay.handle_event(event) == 1
    assert [s.user_name for s in publisher.samples] == ["a"]


def test_relay_reconnects_after_failure_and_stops():
    publisher = RecordingPublisher()
    attempts = []
    event = _event(WriteRowsEvent, [{"values": {"id": 9, "user_name": "a", "lat": 1, "lon": 1, "timestamp": TS}}])

    class Reader:
        def __init__(self, **kwargs):
            attempts.append(kwargs)
            if len(attempts) == 1:
                raise ConnectionError("server gone")

        def __iter__(self):
            yield event

        def close(self):
            pass

    relay = BinlogRelay(DB, publisher, retry_initial_seconds=0.01, retry_max_seconds=0.02, reader_factory=Reader)
    relay.start()
    try:
        assert publisher.published.wait(5)
    finally:
        relay.stop()

    assert not relay.running
    assert attempts[0]["only_schemas"] == ["field_attendance"]
    assert attempts[0]["only_tables"] == ["wff_location_tracking"]
    assert attempts[0]["resume_stream"] is True
    assert publisher.samples[0].id == 9
