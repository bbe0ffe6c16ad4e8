from __future__ import annotations

from flask import Flask

from ..api import current_caller, json_body, respond, roles_required, token_required
from ..container import Container
from ..core.permissions import ADMIN_HR, ADMIN_ONLY


def register(app: Flask, container: Container) -> None:
    service = container.employee_service

    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    @token_required
    def list_employees():
        return respond([e.to_dict() for e in service.list_employees()])

    @app.route("/api/employees/stats", methods=["GET"], endpoint="employees_stats")
    @token_required
    @roles_required(ADMIN_HR)
    def stats():
        return respond(service.get_stats(current_caller()))

    @app.route("/api/employees/department/<int:department_id>", methods=["GET"], endpoint="employees_by_department")
    @token_required
    def by_department(department_id: int):
        return respond(service.list_by_department(department_id))

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="employees_get")
    @token_required
    def get_employee(employee_id: int):
        return respond(service.get_employee(employee_id).to_dict())

    @app.route("/api/employees", methods=["POST"], endpoint="employees_create")
    @token_required
    @roles_required(ADMIN_HR)
    def create_employee():
        employee = service.create_employee(current_caller(), json_body())
        return respond(employee.to_dict(), 201)

    @app.route("/api/employees/<int:employee_id>", methods=["PUT"], endpoint="employees_update")
    @token_required
    @roles_required(ADMIN_HR)
    def update_employee(employee_id: int):
        return respond(service.update_employee(current_caller(), employee_id, json_body()).to_dict())

    @app.route("/api/employees/<int:employee_id>", methods=["DELETE"], endpoint="employees_delete")
    @token_required
    @roles_required(ADMIN_ONLY)
    def delete_employee(employee_id: int):
        service.delete_employee(current_caller(), employee_id)
        return respond({"message": "Employee deleted successfully"})
