from __future__ import annotations

from flask import Flask, request, send_file

from ..common.datetime_utils import parse_iso_date
from ..common.http import api_response, json_body
from ..container import Container
from ..core.exceptions import NotFoundError, ValidationError


def register(app: Flask, container: Container) -> None:
    def _param(name: str):
        return request.form.get(name) or request.args.get(name) or json_body().get(name)

    def _send_stored(relative):
        if not relative or not container.file_storage.exists(relative):
            raise NotFoundError("Image not found")
        return send_file(container.file_storage.absolute_path(relative))

    @app.route("/api/data/mark-attendance", methods=["POST"], endpoint="mark_attendance")
    def mark_attendance():
        field_images = request.files.getlist("fieldImages") + [
            f for f in (request.files.get("fieldImage"), request.files.get("fieldImage1")) if f is not None
        ]
        record = container.attendance_service.record_punch(
            request.form.get("userName", ""),
            request.files.get("image"),
            timestamp=request.form.get("timestamp"),
            attendance_type=request.form.get("attendanceType"),
            reason=request.form.get("reason"),
            field_images=field_images,
        )
        return api_response("Attendance marked successfully", record.to_dict(), username=record.user_name)

    @app.route("/api/data/attendance/field-images", methods=["POST"], endpoint="attendance_field_images")
    def attendance_field_images():
        images = request.files.getlist("fieldImages") + [
            f for f in (request.files.get("fieldImage"), request.files.get("fieldImage1")) if f is not None
        ]
        record = container.attendance_service.upload_field_images(request.form.get("username", ""), images)
        return api_response("Field images uploaded successfully", record.to_dict(), username=record.user_name)

    @app.route("/api/data/dashboard", methods=["POST"], endpoint="attendance_dashboard")
    def attendance_dashboard():
        user_name = _param("userName")
        raw_date = _param("date")
        if not raw_date:
            raise ValidationError("date is required (yyyy-MM-dd)")
        try:
            day = parse_iso_date(raw_date)
        except ValueError as exc:
            raise ValidationError("Invalid date format. Use yyyy-MM-dd") from exc
        summary = container.attendance_service.day_summary(user_name, day)
        return api_response("Dashboard data fetched successfully", summary.to_dict(), username=summary.user_name)

    @app.route("/api/data/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="delete_attendance")
    def delete_attendance(attendance_id: int):
        container.attendance_service.delete(attendance_id)
        return api_response("Attendance deleted successfully", {"id": attendance_id})

    @app.route("/api/data/attendance/image/<int:attendance_id>", methods=["GET"], endpoint="attendance_image")
    def attendance_image(attendance_id: int):
        record = container.attendance_service.find_by_id(attendance_id)
        leg = (request.args.get("type") or "morning").lower()
        if leg not in {"morning", "evening"}:
            raise ValidationError("type must be morning or evening")
        return _send_stored(record.morning_image_path if leg == "morning" else record.evening_image_path)

    @app.route("/api/data/attendance/field-images/<int:attendance_id>", methods=["GET"], endpoint="attendance_field_image")
    def attendance_field_image(attendance_id: int):
        record = container.attendance_service.find_by_id(attendance_id)
        index = request.args.get("index", default=0, type=int)
        if index < 0 or index >= len(record.field_image_paths):
            raise NotFoundError("Image not found")
        return _send_stored(record.field_image_paths[index])

    @app.route("/api/data/employee/profile/image/<int:employee_id>", methods=["GET"], endpoint="employee_profile_image")
    def employee_profile_image(employee_id: int):
        employee = container.employee_service.find_by_id(employee_id)
        return _send_stored(employee.face_photo_path)
