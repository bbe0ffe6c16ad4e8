from __future__ import annotations

from flask import Flask, request

from ..api import current_caller, json_body, respond, roles_required, token_required
from ..common.validators import parse_optional_int
from ..container import Container
from ..core.permissions import LEAVE_APPROVERS


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/api/leaves", methods=["POST"], endpoint="leaves_create")
    @token_required
    def create_leave():
        data = json_body()
        leave = service.create_leave(
            current_caller(),
            data,
            employee_id=parse_optional_int(data.get("employee_id"), "Employee"),
        )
        return respond(leave, 201)

    @app.route("/api/leaves", methods=["GET"], endpoint="leaves_list")
    @token_required
    @roles_required(LEAVE_APPROVERS)
    def list_leaves():
        return respond(service.list_all(current_caller(), status=request.args.get("status")))

    @app.route("/api/leaves/my-leaves", methods=["GET"], endpoint="leaves_mine")
    @token_required
    def my_leaves():
        return respond(service.list_my_leaves(current_caller()))

    @app.route("/api/leaves/employee/<int:employee_id>", methods=["GET"], endpoint="leaves_for_employee")
    @token_required
    @roles_required(LEAVE_APPROVERS)
    def leaves_for_employee(employee_id: int):
        return respond(service.list_for_employee(current_caller(), employee_id))

    @app.route("/api/leaves/<int:leave_id>", methods=["GET"], endpoint="leaves_get")
    @token_required
    def get_leave(leave_id: int):
        return respond(service.get_leave(current_caller(), leave_id))

    @app.route("/api/leaves/<int:leave_id>", methods=["PUT"], endpoint="leaves_update")
    @token_required
    def update_leave(leave_id: int):
        return respond(service.update_leave(current_caller(), leave_id, json_body()))

    @app.route("/api/leaves/<int:leave_id>/status", methods=["PUT"], endpoint="leaves_decide")
    @token_required
    @roles_required(LEAVE_APPROVERS)
    def decide_leave(leave_id: int):
        data = json_body()
        leave = service.decide_leave(
            current_caller(),
            leave_id,
            status=data.get("status"),
            comments=data.get("approval_comments"),
        )
        return respond(leave)

    @app.route("/api/leaves/<int:leave_id>/cancel", methods=["PUT"], endpoint="leaves_cancel")
    @token_required
    def cancel_leave(leave_id: int):
        return respond(service.cancel_leave(current_caller(), leave_id))
