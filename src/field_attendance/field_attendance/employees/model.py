from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional

from werkzeug.datastructures import FileStorage


@dataclass(frozen=True)
class Employee:
    """Onboarded employee. ``username`` is ``{identity_card_no}_{name}``."""

    id: Optional[int]
    name: str
    identity_card_no: str
    username: str
    designation: Optional[str] = None
    date_of_birth: Optional[str] = None
    post: Optional[str] = None
    district: Optional[str] = None
    tehsil: Optional[str] = None
    home_location: Optional[str] = None
    mobile_number: Optional[str] = None
    blood_group: Optional[str] = None
    email_address: Optional[str] = None
    emergency_contact_no: Optional[str] = None
    lab_name: Optional[str] = None
    office_name: Optional[str] = None
    office_address: Optional[str] = None
    permanent_address: Optional[str] = None
    face_photo_path: Optional[str] = None
    signature_path: Optional[str] = None
    is_active: bool = False

    def to_dict(self) -> dict:
        d = asdict(self)
        return {
            "id": d["id"],
            "name": d["name"],
            "identityCardNo": d["identity_card_no"],
            "username": d["username"],
            "designation": d["designation"],
            "dateOfBirth": d["date_of_birth"],
            "post": d["post"],
            "district": d["district"],
            "tehsil": d["tehsil"],
            "homeLocation": d["home_location"],
            "mobileNumber": d["mobile_number"],
            "bloodGroup": d["blood_group"],
            "emailAddress": d["email_address"],
            "emergencyContactNo": d["emergency_contact_no"],
            "labName": d["lab_name"],
            "officeName": d["office_name"],
            "officeAddress": d["office_address"],
            "permanentAddress": d["permanent_address"],
            "facePhotoPath": d["face_photo_path"],
            "signaturePath": d["signature_path"],
            "isActive": d["is_active"],
        }


@dataclass
class EmployeeRequest:
    """Onboarding form as posted by the client (multipart)."""

    name: Optional[str] = None
    identity_card_no: Optional[str] = None
    work_type: Optional[str] = None
    district: Optional[str] = None
    tehsil: Optional[str] = None
    post: Optional[str] = None
    date_of_birth: Optional[str] = None
    address: Optional[str] = None
    home_location: Optional[str] = None
    mobile_number: Optional[str] = None
    blood_group: Optional[str] = None
    email_address: Optional[str] = None
    emergency_contact_no: Optional[str] = None
    lab_name: Optional[str] = None
    office_name: Optional[str] = None
    face_photo: Optional[FileStorage] = None
    signature: Optional[FileStorage] = None


@dataclass(frozen=True)
class EmployeeCreated:
    id: int
    name: str
    identity_card_no: str
    username: str
    message: str = "Employee created successfully"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "identityCardNo": self.identity_card_no,
            "username": self.username,
            "message": self.message,
            "success": True,
        }


# Fields an employee may change on their own profile.
PROFILE_FIELDS = (
    "date_of_birth",
    "lab_name",
    "office_name",
    "mobile_number",
    "blood_group",
    "office_address",
    "home_location",
    "email_address",
    "permanent_address",
    "emergency_contact_no",
)
