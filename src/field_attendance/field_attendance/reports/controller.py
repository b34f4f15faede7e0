from __future__ import annotations

from flask import Flask, request

from ..common.http import api_response, json_body
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    def _params() -> dict:
        return request.form.to_dict() or json_body()

    def _month_args(data: dict) -> tuple[str, int, int]:
        username = (data.get("username") or "").strip()
        if not username:
            raise ValidationError("username is required")
        try:
            return username, int(data.get("year")), int(data.get("month"))
        except (TypeError, ValueError) as exc:
            raise ValidationError("year and month must be numbers") from exc

    @app.route("/api/data/dashboard/monthly", methods=["POST"], endpoint="monthly_summary")
    def monthly_summary():
        username, year, month = _month_args(_params())
        data = container.report_service.monthly_summary(username, year, month)
        return api_response("Monthly attendance summary retrieved successfully", data, username=username)

    @app.route("/api/data/dashboard/monthly/details", methods=["POST"], endpoint="monthly_details")
    def monthly_details():
        params = _params()
        username, year, month = _month_args(params)
        data = container.report_service.monthly_details(username, year, month, params.get("category") or "")
        return api_response("Details retrieved successfully", data, username=username)

    @app.route("/api/data/dashboard-stats-admin", methods=["GET"], endpoint="admin_dashboard_stats")
    def admin_dashboard_stats():
        return api_response("Dashboard data retrieved successfully", container.report_service.admin_dashboard())
