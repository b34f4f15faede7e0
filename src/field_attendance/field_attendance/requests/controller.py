from __future__ import annotations

from flask import Flask, request

from ..common.http import api_response, json_body
from ..container import Container
from .service import NewExtraWork, NewLeave


def register(app: Flask, container: Container) -> None:
    def _form() -> dict:
        return request.form.to_dict() or json_body()

    @app.route("/api/data/applyLeave", methods=["POST"], endpoint="apply_leave")
    def apply_leave():
        data = _form()
        leave = container.request_service.apply_leave(
            NewLeave(
                username=data.get("username"),
                start_date=data.get("startDate"),
                end_date=data.get("endDate"),
                duration_type=data.get("durationType"),
                leave_type=data.get("leaveType"),
                reason=data.get("reason"),
            )
        )
        return api_response("Leave applied successfully", leave.to_dict(), username=leave.username)

    @app.route("/api/data/leaves", methods=["GET"], endpoint="list_leaves")
    def list_leaves():
        leaves = container.request_service.list_leaves(request.args.get("username"))
        return api_response("Leaves fetched successfully", [l.to_dict() for l in leaves])

    @app.route("/api/data/applyExtraWork", methods=["POST"], endpoint="apply_extra_work")
    def apply_extra_work():
        data = _form()
        work = container.request_service.apply_extra_work(
            NewExtraWork(
                username=data.get("username"),
                work_date=data.get("date"),
                start_time=data.get("startTime"),
                end_time=data.get("endTime"),
                reason=data.get("reason"),
            )
        )
        return api_response("Extra Work applied successfully", work.to_dict(), username=work.username)
