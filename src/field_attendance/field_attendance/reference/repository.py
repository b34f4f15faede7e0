from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Holiday, OfficeHours


class ReferenceRepository(Protocol):
    """Read-only lookup tables (locations, work types, offices, office time, holidays)."""

    def list_districts(self) -> Sequence[str]:
        raise NotImplementedError

    def list_tehsils(self, district: str) -> Sequence[str]:
        raise NotImplementedError

    def list_work_types(self) -> Sequence[str]:
        raise NotImplementedError

    def list_office_names(self) -> Sequence[str]:
        raise NotImplementedError

    def list_leave_types(self) -> Sequence[str]:
        raise NotImplementedError

    def get_office_hours(self) -> Optional[OfficeHours]:
        raise NotImplementedError

    def list_holidays(self, start: date, end: date) -> Sequence[Holiday]:
        raise NotImplementedError
