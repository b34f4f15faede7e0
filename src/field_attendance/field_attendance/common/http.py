"""JSON envelopes and the single translation point for domain errors."""

from __future__ import annotations

import logging
from typing import Any, Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError, StorageError
from .validators import field_errors_to_dicts

logger = logging.getLogger(__name__)


def api_response(message: str, data: Any = None, *, status: int = 200, username: Optional[str] = None):
    body: dict[str, Any] = {"message": message, "statusCode": status, "data": data}
    if username is not None:
        body["username"] = username
    return jsonify(body), status


def error_response(message: str, status: int, errors: Optional[list[dict]] = None):
    body: dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return jsonify(body), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded.strip():
        return forwarded.split(",")[0].strip()
    return request.remote_addr or "unknown"


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain_error(exc: DomainError):
        if isinstance(exc, StorageError):
            logger.error("Storage failure: %s", exc.message, exc_info=exc.__cause__ or exc)
        return error_response(exc.message or "Request failed", exc.status_code, field_errors_to_dicts(exc.errors))

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return error_response(exc.description or exc.name, exc.code or 500)

    @app.errorhandler(Exception)
    def _unexpected(exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return error_response("Internal server error", 500)
