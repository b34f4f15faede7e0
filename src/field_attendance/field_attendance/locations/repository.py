from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import LocationSample


class LocationRepository(Protocol):
    def append(self, sample: LocationSample) -> int:
        raise NotImplementedError

    def latest_per_user(self) -> Sequence[LocationSample]:
        raise NotImplementedError

    def latest_for_user(self, user_name: str) -> Optional[LocationSample]:
        raise NotImplementedError

    def history_for_user(self, user_name: str) -> Sequence[LocationSample]:
        """All samples of one user, oldest first."""
        raise NotImplementedError

    def history_between(
        self, start: datetime, end: datetime, user_name: Optional[str] = None
    ) -> Sequence[LocationSample]:
        """Samples in [start, end], newest first."""
        raise NotImplementedError
