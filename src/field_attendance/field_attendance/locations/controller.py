from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_datetime
from ..common.http import api_response
from ..container import Container
from ..core.constants import ISO_TIMESTAMP_HINT
from ..core.exceptions import NotFoundError, ValidationError


def _as_bool(value) -> bool:
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def register(app: Flask, container: Container) -> None:
    def _optional_datetime(name: str):
        raw = request.args.get(name)
        if not raw:
            return None
        try:
            return parse_iso_datetime(raw)
        except ValueError as exc:
            raise ValidationError(f"{name} must use ISO format: {ISO_TIMESTAMP_HINT}") from exc

    @app.route("/api/data/location-tracking", methods=["POST"], endpoint="location_tracking")
    def location_tracking():
        data = request.form.to_dict() or (request.get_json(silent=True) or {})
        result = container.location_service.record_location(
            data.get("userName"),
            data.get("lat"),
            data.get("lon"),
            data.get("timestamp"),
            _as_bool(data.get("isActive", False)),
        )
        return api_response(result.message, result.data, status=result.status_code, username=data.get("userName"))

    @app.route("/api/data/location-latest", methods=["GET"], endpoint="location_latest")
    def location_latest():
        return jsonify([s.to_dict() for s in container.location_service.latest_per_user()])

    @app.route("/api/data/location-latest/<user_name>", methods=["GET"], endpoint="location_latest_for_user")
    def location_latest_for_user(user_name: str):
        samples = list(container.location_service.history_for_user(user_name))
        samples.reverse()
        return jsonify([s.to_dict() for s in samples])

    @app.route("/api/data/location-latest-one/<user_name>", methods=["GET"], endpoint="location_latest_one")
    def location_latest_one(user_name: str):
        sample = container.location_service.latest_for_user(user_name)
        if sample is None:
            raise NotFoundError(f"No location found for user: {user_name}")
        return api_response("Latest location fetched successfully", sample.to_dict(), username=user_name)

    @app.route("/api/data/location-history", methods=["GET"], endpoint="location_history")
    def location_history():
        samples = container.location_service.history(
            _optional_datetime("from"),
            _optional_datetime("to"),
            request.args.get("userName"),
        )
        return jsonify([s.to_dict() for s in samples])
