from __future__ import annotations

from datetime import date

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/data/districts", methods=["GET"], endpoint="data_districts")
    def data_districts():
        return jsonify(container.location_directory.districts())

    @app.route("/api/data/tehsils", methods=["GET"], endpoint="data_tehsils")
    def data_tehsils():
        return jsonify(container.location_directory.tehsils(request.args.get("district")))

    @app.route("/api/data/work-types", methods=["GET"], endpoint="data_work_types")
    def data_work_types():
        return jsonify(container.reference_service.work_types())

    @app.route("/api/data/office-names", methods=["GET"], endpoint="data_office_names")
    def data_office_names():
        return jsonify(container.reference_service.office_names())

    @app.route("/api/data/leave-types", methods=["GET"], endpoint="data_leave_types")
    def data_leave_types():
        return jsonify(container.reference_service.leave_types())

    @app.route("/api/data/holidays", methods=["GET"], endpoint="data_holidays")
    def data_holidays():
        year = request.args.get("year", type=int) or date.today().year
        start_s = request.args.get("start")
        end_s = request.args.get("end")
        try:
            start = parse_iso_date(start_s) if start_s else date(year, 1, 1)
            end = parse_iso_date(end_s) if end_s else date(year, 12, 31)
        except ValueError as exc:
            raise ValidationError("Dates must use the format yyyy-MM-dd") from exc
        holidays = container.reference_service.holidays_between(start, end)
        return jsonify(
            [
                {"holidayDate": h.holiday_date.isoformat(), "name": h.name, "description": h.description}
                for h in holidays
            ]
        )
