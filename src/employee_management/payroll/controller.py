from __future__ import annotations

from flask import Flask, request

from ..api import current_caller, json_body, respond, roles_required, token_required
from ..container import Container
from ..core.permissions import ADMIN_HR


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    @app.route("/api/salary", methods=["GET"], endpoint="salary_list")
    @token_required
    @roles_required(ADMIN_HR)
    def list_salaries():
        return respond(
            service.list_salaries(
                current_caller(),
                month=request.args.get("month"),
                year=request.args.get("year"),
            )
        )

    @app.route("/api/salary", methods=["POST"], endpoint="salary_create")
    @token_required
    @roles_required(ADMIN_HR)
    def create_salary():
        return respond(service.create_salary(current_caller(), json_body()), 201)

    @app.route("/api/salary/my-salary", methods=["GET"], endpoint="salary_mine")
    @token_required
    def my_salary():
        return respond(service.list_my_salaries(current_caller()))

    @app.route("/api/salary/employee/<int:employee_id>", methods=["GET"], endpoint="salary_for_employee")
    @token_required
    @roles_required(ADMIN_HR)
    def salary_for_employee(employee_id: int):
        return respond(service.list_for_employee(current_caller(), employee_id))

    @app.route("/api/salary/<int:salary_id>", methods=["GET"], endpoint="salary_get")
    @token_required
    def get_salary(salary_id: int):
        return respond(service.get_salary(current_caller(), salary_id))

    @app.route("/api/salary/<int:salary_id>", methods=["PUT"], endpoint="salary_update")
    @token_required
    @roles_required(ADMIN_HR)
    def update_salary(salary_id: int):
        return respond(service.update_salary(current_caller(), salary_id, json_body()))

    @app.route("/api/salary/<int:salary_id>/process", methods=["PUT"], endpoint="salary_process")
    @token_required
    @roles_required(ADMIN_HR)
    def process_salary(salary_id: int):
        return respond(service.process_salary(current_caller(), salary_id))

    @app.route("/api/salary/<int:salary_id>/pay", methods=["PUT"], endpoint="salary_pay")
    @token_required
    @roles_required(ADMIN_HR)
    def pay_salary(salary_id: int):
        return respond(service.mark_paid(current_caller(), salary_id))
