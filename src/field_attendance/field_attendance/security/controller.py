from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body
from ..container import Container
from .middleware import current_user


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/validate", methods=["GET"], endpoint="auth_validate")
    def auth_validate():
        if current_user() is None:
            return "Invalid token", 401
        return "Token is valid", 200

    @app.route("/api/web/validate-token", methods=["POST"], endpoint="web_validate_token")
    def web_validate_token():
        token = str(json_body().get("token") or "")
        result = container.tokens.validate(token)
        if not result.valid:
            return jsonify({"valid": False}), 200
        return jsonify({"valid": True, "username": result.username}), 200
