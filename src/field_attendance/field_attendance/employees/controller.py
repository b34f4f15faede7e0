from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import api_response, json_body
from ..container import Container
from ..core.exceptions import ValidationError
from .model import EmployeeRequest

# multipart field -> EmployeeRequest attribute
_FORM_FIELDS = {
    "name": "name",
    "identityCardNo": "identity_card_no",
    "workType": "work_type",
    "district": "district",
    "tehsil": "tehsil",
    "post": "post",
    "dateOfBirth": "date_of_birth",
    "address": "address",
    "homeLocation": "home_location",
    "mobileNumber": "mobile_number",
    "bloodGroup": "blood_group",
    "emailAddress": "email_address",
    "emergencyContactNo": "emergency_contact_no",
    "labName": "lab_name",
    "officeName": "office_name",
}

_PROFILE_FIELDS = {
    "dateOfBirth": "date_of_birth",
    "labName": "lab_name",
    "officeName": "office_name",
    "mobileNumber": "mobile_number",
    "bloodGroup": "blood_group",
    "officeAddress": "office_address",
    "homeLocation": "home_location",
    "emailAddress": "email_address",
    "permanentAddress": "permanent_address",
    "emergencyContactNo": "emergency_contact_no",
}


def register(app: Flask, container: Container) -> None:
    @app.route("/api/data/employees", methods=["POST"], endpoint="data_create_employee")
    def data_create_employee():
        req = EmployeeRequest(**{attr: request.form.get(field) for field, attr in _FORM_FIELDS.items()})
        req.face_photo = request.files.get("uploadFacePhoto")
        req.signature = request.files.get("uploadSignature")
        created = container.employee_service.create_employee(req)
        return jsonify(created.to_dict()), 201

    @app.route("/api/data/employees", methods=["GET"], endpoint="data_list_employees")
    def data_list_employees():
        return jsonify([e.to_dict() for e in container.employee_service.list_employees()])

    @app.route("/api/data/employees/<int:employee_id>", methods=["GET"], endpoint="data_employee_by_id")
    def data_employee_by_id(employee_id: int):
        return jsonify(container.employee_service.find_by_id(employee_id).to_dict())

    @app.route("/api/data/employees/identity/<identity_card_no>", methods=["GET"], endpoint="data_employee_by_identity")
    def data_employee_by_identity(identity_card_no: str):
        return jsonify(container.employee_service.find_by_identity_card(identity_card_no).to_dict())

    @app.route("/api/data/employees/check-identity/<identity_card_no>", methods=["GET"], endpoint="data_check_identity")
    def data_check_identity(identity_card_no: str):
        unique = container.employee_service.is_identity_card_unique(identity_card_no)
        return jsonify({"identityCardNo": identity_card_no, "unique": unique})

    @app.route("/api/data/employee/updateProfile", methods=["POST"], endpoint="data_update_profile")
    def data_update_profile():
        data = json_body() or request.form.to_dict()
        raw_id = data.get("id")
        try:
            employee_id = int(raw_id)
        except (TypeError, ValueError) as exc:
            raise ValidationError("Employee id is required") from exc
        values = {attr: data.get(field) for field, attr in _PROFILE_FIELDS.items()}
        employee = container.employee_service.update_profile(employee_id, values)
        return api_response("Profile updated successfully", employee.to_dict(), username=employee.username)
