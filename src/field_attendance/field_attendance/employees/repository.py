from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    def exists_by_identity_card(self, identity_card_no: str) -> bool:
        raise NotImplementedError

    def exists_by_designation(self, designation: str) -> bool:
        raise NotImplementedError

    def create(self, employee: Employee) -> int:
        """Insert and return the new id. Raises ConflictError on a unique-key clash."""
        raise NotImplementedError

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_identity_card(self, identity_card_no: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[Employee]:
        raise NotImplementedError

    def update_fields(self, employee_id: int, fields: Mapping[str, str]) -> bool:
        raise NotImplementedError

    def set_active(self, username: str, *, is_active: bool) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError
