from __future__ import annotations

from flask import Flask

from ..api import current_caller, json_body, respond, roles_required, token_required
from ..container import Container
from ..core.permissions import ADMIN_ONLY


def register(app: Flask, container: Container) -> None:
    # Positions are exposed to clients as "roles".
    service = container.position_service

    @app.route("/api/roles", methods=["GET"], endpoint="roles_list")
    @token_required
    def list_roles():
        return respond(service.list_positions())

    @app.route("/api/roles/department/<int:department_id>", methods=["GET"], endpoint="roles_by_department")
    @token_required
    def by_department(department_id: int):
        return respond(service.list_by_department(department_id))

    @app.route("/api/roles/<int:position_id>", methods=["GET"], endpoint="roles_get")
    @token_required
    def get_role(position_id: int):
        return respond(service.get_position(position_id))

    @app.route("/api/roles", methods=["POST"], endpoint="roles_create")
    @token_required
    @roles_required(ADMIN_ONLY)
    def create_role():
        return respond(service.create_position(current_caller(), json_body()), 201)

    @app.route("/api/roles/<int:position_id>", methods=["PUT"], endpoint="roles_update")
    @token_required
    @roles_required(ADMIN_ONLY)
    def update_role(position_id: int):
        return respond(service.update_position(current_caller(), position_id, json_body()))

    @app.route("/api/roles/<int:position_id>", methods=["DELETE"], endpoint="roles_delete")
    @token_required
    @roles_required(ADMIN_ONLY)
    def delete_role(position_id: int):
        service.delete_position(current_caller(), position_id)
        return respond({"message": "Role deleted successfully"})
