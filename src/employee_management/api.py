"""HTTP glue shared by every controller: bearer-token guard, role guard, JSON helpers."""
from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Iterable

from flask import Flask, current_app, g, jsonify, request
from werkzeug.exceptions import HTTPException

from .common.serialization import to_json
from .core.enums import Role
from .core.exceptions import AuthenticationError, AuthorizationError, DomainError, ValidationError
from .core.permissions import Caller

logger = logging.getLogger(__name__)

EXTENSION_KEY = "employee_management"

LOCAL_ORIGINS = ("http://localhost:3000", "http://localhost:5173", "http://127.0.0.1:5173")


def get_container():
    return current_app.extensions[EXTENSION_KEY]


def current_caller() -> Caller:
    return g.caller


def token_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        header = request.headers.get("Authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise AuthenticationError("Access token required")
        g.caller = get_container().auth_service.resolve_token(token.strip())
        return view(*args, **kwargs)

    return wrapper


def roles_required(allowed: Iterable[Role]):
    allowed = frozenset(allowed)

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if current_caller().role not in allowed:
                raise AuthorizationError("Access denied")
            return view(*args, **kwargs)

        return wrapper

    return decorator


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def respond(value: Any, status: int = 200):
    return jsonify(to_json(value)), status


def install_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        return jsonify({"message": str(exc)}), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return jsonify({"message": exc.description or exc.name}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        body = {"message": "Server error"}
        if app.config.get("DEBUG"):
            body["error"] = str(exc)
        return jsonify(body), 500
