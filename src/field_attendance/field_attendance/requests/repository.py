from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import ExtraWork, LeaveRequest


class LeaveRepository(Protocol):
    def create_leave(self, leave: LeaveRequest) -> int:
        raise NotImplementedError

    def list_leaves(self, username: Optional[str] = None) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_active_for_user(self, username: str) -> Sequence[LeaveRequest]:
        """Leaves that are not rejected."""
        raise NotImplementedError

    def list_overlapping(self, start: date, end: date, username: Optional[str] = None) -> Sequence[LeaveRequest]:
        """Non-rejected leaves intersecting [start, end]."""
        raise NotImplementedError


class ExtraWorkRepository(Protocol):
    def create_extra_work(self, work: ExtraWork) -> int:
        raise NotImplementedError

    def list_for_user_and_date(self, username: str, work_date: date) -> Sequence[ExtraWork]:
        raise NotImplementedError
