from __future__ import annotations

from flask import Flask

from ..api import current_caller, json_body, respond, token_required
from ..container import Container


def _user_payload(identity, employee) -> dict:
    user = identity.public_dict()
    user["employee"] = employee.to_dict()
    return user


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        data = json_body()
        result = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        return respond({"token": result.token, "user": _user_payload(result.identity, result.employee)})

    @app.route("/api/auth/profile", methods=["GET"], endpoint="auth_profile")
    @token_required
    def profile():
        identity, employee = container.auth_service.get_profile(current_caller())
        return respond(_user_payload(identity, employee))

    @app.route("/api/auth/password", methods=["PUT"], endpoint="auth_change_password")
    @token_required
    def change_password():
        data = json_body()
        container.auth_service.change_password(
            current_caller(),
            current_password=data.get("current_password", ""),
            new_password=data.get("new_password", ""),
        )
        return respond({"message": "Password updated successfully"})
