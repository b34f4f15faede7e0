from datetime import date, time

from src.field_attendance.field_attendance.reference.service import LocationDirectory, ReferenceService
from tests.fakes import FakeReferenceRepo


def test_location_directory_caches_lookups():
    repo = FakeReferenceRepo()
    directory = LocationDirectory(repo)

    assert directory.is_valid_district("Lucknow")
    assert directory.is_valid_district(" Lucknow ")
    assert not directory.is_valid_district("Agra")
    assert repo.district_calls == 1

    directory.clear()
    directory.districts()
    assert repo.district_calls == 2


def test_tehsils_for_blank_district_is_empty():
    directory = LocationDirectory(FakeReferenceRepo())

    assert directory.tehsils("") == []
    assert directory.tehsils("Lucknow") == ["Sadar", "Malihabad"]
    assert directory.is_valid_tehsil("Lucknow", "Sadar")
    assert not directory.is_valid_tehsil("Kanpur Nagar", "Sadar")


def test_office_hours_fall_back_to_defaults():
    svc = ReferenceService(FakeReferenceRepo(hours=None), default_start=time(9, 30), default_end=time(17, 30))

    hours = svc.office_hours()

    assert (hours.start_time, hours.end_time) == (time(9, 30), time(17, 30))


def test_holiday_lookup():
    svc = ReferenceService(FakeReferenceRepo(holidays=[(date(2025, 1, 26), "Republic Day")]))

    assert svc.holiday_on(date(2025, 1, 26)).name == "Republic Day"
    assert svc.holiday_on(date(2025, 1, 27)) is None
    assert len(svc.holidays_between(date(2025, 1, 1), date(2025, 1, 31))) == 1
