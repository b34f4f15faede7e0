from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local, parse_iso_datetime
from ..core.constants import DEFAULT_HISTORY_HOURS, ISO_TIMESTAMP_HINT
from ..employees.repository import EmployeeRepository
from .model import ApiResult, LocationSample
from .repository import LocationRepository

logger = logging.getLogger(__name__)


def _coordinate(value, label: str, limit: float) -> float:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(f"{label} is required")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{label} must be a number")
    if not math.isfinite(number):
        raise ValueError(f"{label} must be a number")
    if abs(number) > limit:
        raise ValueError(f"{label} must be between -{limit:g} and {limit:g}")
    return number


class LocationService:
    """Use case: store GPS samples and answer latest/history queries.

    Saving a sample does not broadcast; the binlog relay picks the row up.
    """

    def __init__(
        self,
        locations: LocationRepository,
        employees: EmployeeRepository,
        *,
        clock: Callable[[], datetime] = now_local,
        history_hours: int = DEFAULT_HISTORY_HOURS,
    ):
        self._locations = locations
        self._employees = employees
        self._clock = clock
        self._history_hours = history_hours

    def record_location(
        self,
        user_name: Optional[str],
        lat,
        lon,
        timestamp: Optional[str],
        is_active: bool,
    ) -> ApiResult:
        if timestamp is not None and timestamp.strip():
            try:
                at = parse_iso_datetime(timestamp)
            except ValueError:
                return ApiResult(
                    400,
                    "Invalid timestamp format",
                    {"error": f"Invalid timestamp format. Use ISO format: {ISO_TIMESTAMP_HINT}"},
                )
        else:
            at = self._clock()

        user_name = (user_name or "").strip()
        employee = self._employees.get_by_username(user_name) if user_name else None
        if employee is None:
            return ApiResult(404, "Employee not found", {"error": f"No employee with username: {user_name}"})

        try:
            lat_v = _coordinate(lat, "lat", 90.0)
            lon_v = _coordinate(lon, "lon", 180.0)
        except ValueError as exc:
            return ApiResult(400, "Invalid coordinates", {"error": str(exc)})

        self._employees.set_active(employee.username, is_active=bool(is_active))
        sample_id = self._locations.append(
            LocationSample(id=None, user_name=employee.username, lat=lat_v, lon=lon_v, timestamp=at)
        )
        logger.debug("Stored location sample %s for %s", sample_id, employee.username)
        return ApiResult(200, "Location saved and employee status updated successfully", {"flag": "success", "id": sample_id})

    def latest_per_user(self) -> Sequence[LocationSample]:
        return self._locations.latest_per_user()

    def latest_for_user(self, user_name: str) -> Optional[LocationSample]:
        return self._locations.latest_for_user(user_name)

    def history_for_user(self, user_name: str) -> Sequence[LocationSample]:
        return self._locations.history_for_user(user_name)

    def history(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        user_name: Optional[str] = None,
    ) -> Sequence[LocationSample]:
        end = end or self._clock()
        start = start or end - timedelta(hours=self._history_hours)
        return self._locations.history_between(start, end, (user_name or "").strip() or None)
