from __future__ import annotations

from flask import Flask

from ..api import current_caller, json_body, respond, roles_required, token_required
from ..container import Container
from ..core.permissions import REVIEWERS, TEAM_LEADS


def register(app: Flask, container: Container) -> None:
    service = container.performance_service

    @app.route("/api/performance", methods=["GET"], endpoint="performance_list")
    @token_required
    @roles_required(REVIEWERS)
    def list_reviews():
        return respond(service.list_reviews(current_caller()))

    @app.route("/api/performance", methods=["POST"], endpoint="performance_create")
    @token_required
    @roles_required(REVIEWERS)
    def create_review():
        return respond(service.create_review(current_caller(), json_body()), 201)

    @app.route("/api/performance/reviewable", methods=["GET"], endpoint="performance_reviewable")
    @token_required
    @roles_required(TEAM_LEADS)
    def reviewable():
        employees = service.list_reviewable_employees(current_caller())
        return respond([e.to_dict() for e in employees])

    @app.route("/api/performance/employee/<int:employee_id>", methods=["GET"], endpoint="performance_for_employee")
    @token_required
    def reviews_for_employee(employee_id: int):
        return respond(service.list_for_employee(current_caller(), employee_id))

    @app.route("/api/performance/<int:review_id>", methods=["GET"], endpoint="performance_get")
    @token_required
    def get_review(review_id: int):
        return respond(service.get_review(current_caller(), review_id))

    @app.route("/api/performance/<int:review_id>", methods=["PUT"], endpoint="performance_update")
    @token_required
    @roles_required(REVIEWERS)
    def update_review(review_id: int):
        return respond(service.update_review(current_caller(), review_id, json_body()))

    @app.route("/api/performance/<int:review_id>", methods=["DELETE"], endpoint="performance_delete")
    @token_required
    @roles_required(REVIEWERS)
    def delete_review(review_id: int):
        service.delete_review(current_caller(), review_id)
        return respond({"message": "Performance review deleted successfully"})
