from __future__ import annotations

from datetime import datetime

import pytest

from src.field_attendance.field_attendance.locations.service import LocationService
from tests.fakes import FakeEmployeeRepo, FakeLocationRepo, make_employee

USER = "1234_Asha"
NOW = datetime(2025, 2, 10, 15, 0, 0)


def _service():
    locations = FakeLocationRepo()
    employees = FakeEmployeeRepo(make_employee(USER), make_employee("5678_Ravi"))
    return LocationService(locations, employees, clock=lambda: NOW), locations, employees


def test_record_location_saves_sample_and_active_flag():
    svc, locations, employees = _service()

    result = svc.record_location(USER, "26.85", "80.95", "2025-02-10T14:30:00", True)

    assert result.status_code == 200
    assert result.message == "Location saved and employee status updated successfully"
    assert result.data["flag"] == "success"
    assert employees.active == {USER: True}
    sample = locations.rows[0]
    assert (sample.lat, sample.lon, sample.timestamp) == (26.85, 80.95, datetime(2025, 2, 10, 14, 30, 0))


def test_malformed_timestamp_is_rejected_without_side_effects():
    svc, locations, employees = _service()

    result = svc.record_location(USER, "26.85", "80.95", "not-a-date", True)

    assert result.status_code == 400
    assert "yyyy-MM-dd'T'HH:mm:ss" in result.data["error"]
    assert locations.rows == []
    assert employees.active == {}


def test_unknown_employee_is_404():
    svc, locations, _ = _service()

    result = svc.record_location("ghost", "1", "2", None, True)

    assert result.status_code == 404
    assert result.message == "Employee not found"
    assert locations.rows == []


def test_non_numeric_coordinates_are_400():
    svc, locations, _ = _service()

    assert svc.record_location(USER, "north", "80.95", None, True).status_code == 400
    assert svc.record_location(USER, None, "80.95", None, True).status_code == 400
    assert locations.rows == []


@pytest.mark.parametrize(
    "lat, lon",
    [("nan", "80.95"), ("26.85", "inf"), ("-inf", "80.95"), (float("nan"), 80.95), ("91", "80.95"), ("26.85", "-180.5")],
)
def test_non_finite_or_out_of_range_coordinates_are_400(lat, lon):
    svc, locations, employees = _service()

    result = svc.record_location(USER, lat, lon, None, True)

    assert result.status_code == 400
    assert result.message == "Invalid coordinates"
    assert locations.rows == []
    assert employees.active == {}


def test_blank_timestamp_uses_now():
    svc, locations, _ = _service()

    svc.record_location(USER, 1.5, 2.5, "  ", False)

    assert locations.rows[0].timestamp == NOW


def test_latest_and_history_queries():
    svc, _, _ = _service()
    svc.record_location(USER, 1, 1, "2025-02-10T09:00:00", True)
    svc.record_location(USER, 2, 2, "2025-02-10T12:00:00", True)
    svc.record_location("5678_Ravi", 3, 3, "2025-02-09T08:00:00", True)

    latest = {s.user_name: s.lat for s in svc.latest_per_user()}
    assert latest == {USER: 2.0, "5678_Ravi": 3.0}
    assert svc.latest_for_user(USER).lat == 2.0
    assert [s.lat for s in svc.history_for_user(USER)] == [1.0, 2.0]

    # default window is the last 24 hours, newest first
    assert [s.lat for s in svc.history()] == [2.0, 1.0]
    assert [s.lat for s in svc.history(datetime(2025, 2, 9), NOW, "5678_Ravi")] == [3.0]
