from __future__ import annotations

from flask import Flask

from ..api import current_caller, json_body, respond, roles_required, token_required
from ..container import Container
from ..core.permissions import ADMIN_HR, APPLICANTS


def register(app: Flask, container: Container) -> None:
    service = container.recruitment_service

    # -- job postings ---------------------------------------------------

    @app.route("/api/jobs", methods=["GET"], endpoint="jobs_list")
    @token_required
    def list_jobs():
        return respond(service.list_active_postings())

    @app.route("/api/jobs/<int:posting_id>", methods=["GET"], endpoint="jobs_get")
    @token_required
    def get_job(posting_id: int):
        return respond(service.get_posting(posting_id))

    @app.route("/api/jobs", methods=["POST"], endpoint="jobs_create")
    @token_required
    @roles_required(ADMIN_HR)
    def create_job():
        return respond(service.create_posting(current_caller(), json_body()), 201)

    @app.route("/api/jobs/<int:posting_id>", methods=["PUT"], endpoint="jobs_update")
    @token_required
    @roles_required(ADMIN_HR)
    def update_job(posting_id: int):
        return respond(service.update_posting(current_caller(), posting_id, json_body()))

    @app.route("/api/jobs/<int:posting_id>", methods=["DELETE"], endpoint="jobs_delete")
    @token_required
    @roles_required(ADMIN_HR)
    def delete_job(posting_id: int):
        service.delete_posting(current_caller(), posting_id)
        return respond({"message": "Job posting deleted successfully"})

    # -- applications ---------------------------------------------------

    @app.route("/api/applications", methods=["POST"], endpoint="applications_create")
    @token_required
    @roles_required(APPLICANTS)
    def apply():
        data = json_body()
        application = service.apply(current_caller(), data.get("job_posting_id"), data.get("cover_letter"))
        return respond(application, 201)

    @app.route("/api/applications/my-applications", methods=["GET"], endpoint="applications_mine")
    @token_required
    @roles_required(APPLICANTS)
    def my_applications():
        return respond(service.list_my_applications(current_caller()))

    @app.route("/api/applications/job/<int:posting_id>", methods=["GET"], endpoint="applications_for_job")
    @token_required
    @roles_required(ADMIN_HR)
    def applications_for_job(posting_id: int):
        return respond(service.list_for_posting(current_caller(), posting_id))

    @app.route("/api/applications/<int:application_id>/status", methods=["PUT"], endpoint="applications_status")
    @token_required
    @roles_required(ADMIN_HR)
    def update_status(application_id: int):
        return respond(service.update_application_status(current_caller(), application_id, json_body()))
