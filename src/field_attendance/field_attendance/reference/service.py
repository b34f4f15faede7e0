from __future__ import annotations

import threading
from datetime import date, time
from typing import Optional, Sequence

from cachetools import TTLCache

from ..core.constants import DEFAULT_OFFICE_END, DEFAULT_OFFICE_START
from .model import Holiday, OfficeHours
from .repository import ReferenceRepository


class LocationDirectory:
    """District/tehsil lookups, memoised per process."""

    def __init__(self, repo: ReferenceRepository, *, ttl_seconds: int = 3600):
        self._repo = repo
        self._cache: TTLCache = TTLCache(maxsize=1024, ttl=ttl_seconds)
        self._lock = threading.Lock()

    def _cached(self, key: tuple, loader) -> list[str]:
        with self._lock:
            hit = self._cache.get(key)
        if hit is not None:
            return list(hit)
        value = tuple(loader())
        with self._lock:
            self._cache[key] = value
        return list(value)

    def districts(self) -> list[str]:
        return self._cached(("districts",), self._repo.list_districts)

    def tehsils(self, district: Optional[str]) -> list[str]:
        if district is None or not district.strip():
            return []
        district = district.strip()
        return self._cached(("tehsils", district), lambda: self._repo.list_tehsils(district))

    def is_valid_district(self, district: Optional[str]) -> bool:
        if not district or not district.strip():
            return False
        return district.strip() in self.districts()

    def is_valid_tehsil(self, district: Optional[str], tehsil: Optional[str]) -> bool:
        if not tehsil or not tehsil.strip():
            return False
        return tehsil.strip() in self.tehsils(district)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()


class ReferenceService:
    """Static reference data: work types, offices, office hours, holidays."""

    def __init__(
        self,
        repo: ReferenceRepository,
        *,
        default_start: time = DEFAULT_OFFICE_START,
        default_end: time = DEFAULT_OFFICE_END,
    ):
        self._repo = repo
        self._default_hours = OfficeHours(start_time=default_start, end_time=default_end)

    def work_types(self) -> list[str]:
        return list(self._repo.list_work_types())

    def office_names(self) -> list[str]:
        return list(self._repo.list_office_names())

    def leave_types(self) -> list[str]:
        return list(self._repo.list_leave_types())

    def office_hours(self) -> OfficeHours:
        return self._repo.get_office_hours() or self._default_hours

    def holidays_between(self, start: date, end: date) -> Sequence[Holiday]:
        return list(self._repo.list_holidays(start, end))

    def holiday_on(self, day: date) -> Optional[Holiday]:
        found = self._repo.list_holidays(day, day)
        return found[0] if found else None
