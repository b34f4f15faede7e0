from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..common.http import client_ip, json_body
from ..container import Container
from ..core.exceptions import DomainError
from .model import AuthResult

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _failure(exc: DomainError):
        body = AuthResult(success=False, token=None, message=exc.message).to_dict()
        return jsonify(body), exc.status_code

    @app.route("/api/auth/signup", methods=["POST"], endpoint="auth_signup")
    def auth_signup():
        data = json_body()
        logger.info("Signup request received for username: %s", data.get("username"))
        try:
            result = container.auth_service.register(data.get("username"), data.get("password"), data.get("email"))
        except DomainError as exc:
            return _failure(exc)
        return jsonify(result.to_dict()), 200

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        data = json_body()
        logger.info("Login request received for username: %s", data.get("username"))
        try:
            result = container.auth_service.authenticate(data.get("username"), data.get("password"), client_ip())
        except DomainError as exc:
            return _failure(exc)
        return jsonify(result.to_dict()), 200
