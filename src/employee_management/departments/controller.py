from __future__ import annotations

from flask import Flask

from ..api import current_caller, json_body, respond, roles_required, token_required
from ..container import Container
from ..core.permissions import ADMIN_ONLY


def register(app: Flask, container: Container) -> None:
    service = container.department_service

    @app.route("/api/departments", methods=["GET"], endpoint="departments_list")
    @token_required
    def list_departments():
        return respond(service.list_departments())

    @app.route("/api/departments/<int:department_id>", methods=["GET"], endpoint="departments_get")
    @token_required
    def get_department(department_id: int):
        return respond(service.get_department(department_id))

    @app.route("/api/departments", methods=["POST"], endpoint="departments_create")
    @token_required
    @roles_required(ADMIN_ONLY)
    def create_department():
        return respond(service.create_department(current_caller(), json_body()), 201)

    @app.route("/api/departments/<int:department_id>", methods=["PUT"], endpoint="departments_update")
    @token_required
    @roles_required(ADMIN_ONLY)
    def update_department(department_id: int):
        return respond(service.update_department(current_caller(), department_id, json_body()))

    @app.route("/api/departments/<int:department_id>", methods=["DELETE"], endpoint="departments_delete")
    @token_required
    @roles_required(ADMIN_ONLY)
    def delete_department(department_id: int):
        service.delete_department(current_caller(), department_id)
        return respond({"message": "Department deleted successfully"})
