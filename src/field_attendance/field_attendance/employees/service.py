from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from ..common.validators import require_fields
from ..core.exceptions import ConflictError, InvalidLocationError, NotFoundError
from ..reference.service import LocationDirectory
from ..storage.file_storage import FileStorageService, is_empty_upload
from .face_recognition import FaceRecognitionClient
from .model import PROFILE_FIELDS, Employee, EmployeeCreated, EmployeeRequest
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

_REQUIRED = {
    "name": "Employee name is required",
    "identity_card_no": "Identity card number is required",
    "work_type": "Work Type is required",
    "district": "District is required",
    "tehsil": "Tehsil is required",
}


def convert_date_of_birth(value: Optional[str]) -> Optional[str]:
    """yyyy-mm-dd -> dd/mm/yyyy; anything else is kept as given."""
    if value is None or not value.strip():
        return None
    parts = value.strip().split("-")
    if len(parts) == 3:
        return f"{parts[2]}/{parts[1]}/{parts[0]}"
    return value.strip()


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


class EmployeeService:
    """Use case: onboard employees and look them up."""

    def __init__(
        self,
        employees: EmployeeRepository,
        directory: LocationDirectory,
        storage: FileStorageService,
        face_recognition: FaceRecognitionClient,
    ):
        self._employees = employees
        self._directory = directory
        self._storage = storage
        self._face = face_recognition

    def create_employee(self, req: EmployeeRequest) -> EmployeeCreated:
        values = {name: getattr(req, name) for name in _REQUIRED}
        values["face_photo"] = None if is_empty_upload(req.face_photo) else req.face_photo
        require_fields(values, {**_REQUIRED, "face_photo": "Face photo is required"})

        identity_card = req.identity_card_no.strip()
        name = req.name.strip()
        logger.info("Creating employee with identity card: %s", identity_card)

        if not self.is_identity_card_unique(identity_card):
            raise ConflictError(f"Employee with identity card {identity_card} already exists")

        self._validate_location(req.district, req.tehsil)

        designation = self._unique_designation(req.district.strip(), (req.post or "").strip())
        stored = self._storage.store_employee_files(name, req.face_photo, req.signature)

        employee = Employee(
            id=None,
            name=name,
            identity_card_no=identity_card,
            username=f"{identity_card}_{name}",
            designation=designation,
            date_of_birth=convert_date_of_birth(req.date_of_birth),
            post=req.post,
            district=req.district.strip(),
            tehsil=req.tehsil.strip(),
            home_location=req.home_location,
            mobile_number=req.mobile_number,
            blood_group=req.blood_group,
            email_address=req.email_address,
            emergency_contact_no=req.emergency_contact_no,
            lab_name=req.lab_name,
            office_name=req.office_name,
            office_address=req.address,
            permanent_address=req.address,
            face_photo_path=stored.face_photo_path,
            signature_path=stored.signature_path,
        )
        try:
            employee_id = self._employees.create(employee)
        except Exception:
            self._storage.discard(stored.face_photo_path, stored.signature_path)
            raise
        logger.info("Created employee %s with identity card %s", employee_id, identity_card)

        self._face.submit(identity_card, name, stored.face_photo_path)

        return EmployeeCreated(id=employee_id, name=name, identity_card_no=identity_card, username=employee.username)

    def is_identity_card_unique(self, identity_card_no: Optional[str]) -> bool:
        if _blank(identity_card_no):
            return False
        return not self._employees.exists_by_identity_card(identity_card_no.strip())

    def find_by_id(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if employee is None:
            raise NotFoundError(f"Employee not found with ID: {employee_id}")
        return employee

    def find_by_identity_card(self, identity_card_no: str) -> Employee:
        employee = self._employees.get_by_identity_card(identity_card_no)
        if employee is None:
            raise NotFoundError(f"Employee not found with identity card: {identity_card_no}")
        return employee

    def update_profile(self, employee_id: int, values: Mapping[str, Optional[str]]) -> Employee:
        self.find_by_id(employee_id)
        changes = {k: str(v).strip() for k, v in values.items() if k in PROFILE_FIELDS and not _blank(v)}
        if "date_of_birth" in changes:
            changes["date_of_birth"] = convert_date_of_birth(changes["date_of_birth"])
        if changes:
            self._employees.update_fields(int(employee_id), changes)
        return self.find_by_id(employee_id)

    def list_employees(self) -> Sequence[Employee]:
        return self._employees.list_all()

    def _validate_location(self, district: str, tehsil: str) -> None:
        if not self._directory.is_valid_district(district):
            raise InvalidLocationError(f"Invalid district: {district}")
        if not self._directory.is_valid_tehsil(district, tehsil):
            raise InvalidLocationError(f"Invalid tehsil '{tehsil}' for district '{district}'")

    def _unique_designation(self, district: str, post: str) -> str:
        counter = 1
        while True:
            designation = f"{district}-{post}-{counter}"
            if not self._employees.exists_by_designation(designation):
                return designation
            counter += 1
