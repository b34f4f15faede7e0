"""Request pipeline: bearer token resolution, access policy, CORS and security headers.

Hooks run in this order for every request:

1. ``resolve_bearer``: reads ``Authorization: Bearer <token>`` and stores the
   username in ``g.current_user`` when the token is valid. Never rejects.
2. ``enforce_policy``: looks the path up in ``ACCESS_POLICY`` and answers 401
   when the rule requires an authenticated user and there is none.
3. ``decorate_response`` (after_request): CORS and security headers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from flask import Flask, g, request

from ..common.http import error_response
from .tokens import TokenService

logger = logging.getLogger(__name__)


class Access(str, Enum):
    OPEN = "open"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class PolicyRule:
    prefix: str
    access: Access


ACCESS_POLICY: tuple[PolicyRule, ...] = (
    PolicyRule("/api/auth/", Access.OPEN),
    PolicyRule("/api/web/", Access.OPEN),
    PolicyRule("/api/data/", Access.OPEN),
    PolicyRule("/ws", Access.OPEN),
    PolicyRule("/api/", Access.AUTHENTICATED),
    PolicyRule("/", Access.OPEN),
)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Authorization, Content-Type, X-Requested-With",
    "Access-Control-Max-Age": "3600",
}

SECURITY_HEADERS = {
    "Content-Security-Policy": (
        "default-src 'self'; script-src 'self' 'unsafe-inline'; style-src 'self' 'unsafe-inline'; "
        "img-src 'self' data:; connect-src 'self' ws: wss:; frame-ancestors 'none'"
    ),
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(self), camera=(self), microphone=()",
}

HSTS_VALUE = "max-age=31536000; includeSubDomains"


def access_for(path: str, policy: Sequence[PolicyRule] = ACCESS_POLICY) -> Access:
    for rule in policy:
        if path == rule.prefix.rstrip("/") or path.startswith(rule.prefix):
            return rule.access
    return Access.OPEN


def bearer_token(header_value: Optional[str]) -> Optional[str]:
    if not header_value or not header_value.startswith("Bearer "):
        return None
    token = header_value[len("Bearer "):].strip()
    return token or None


def current_user() -> Optional[str]:
    return g.get("current_user")


def install(app: Flask, tokens: TokenService, policy: Sequence[PolicyRule] = ACCESS_POLICY) -> None:
    @app.before_request
    def resolve_bearer():
        g.current_user = None
        token = bearer_token(request.headers.get("Authorization"))
        if token is None:
            return None
        result = tokens.validate(token)
        if result.valid:
            g.current_user = result.username
        else:
            logger.debug("Ignoring bearer token on %s: %s", request.path, result.reason)
        return None

    @app.before_request
    def enforce_policy():
        if request.method == "OPTIONS":
            return app.make_default_options_response()
        if access_for(request.path, policy) is Access.AUTHENTICATED and current_user() is None:
            return error_response("Authentication required", 401)
        return None

    @app.after_request
    def decorate_response(response):
        for name, value in CORS_HEADERS.items():
            response.headers.setdefault(name, value)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        if request.is_secure:
            response.headers.setdefault("Strict-Transport-Security", HSTS_VALUE)
        return response
