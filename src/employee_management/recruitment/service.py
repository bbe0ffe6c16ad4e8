from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import coerce_date, coerce_optional_datetime, now_local
from ..common.validators import (
    optional_str,
    parse_enum,
    parse_int,
    parse_optional_decimal,
    parse_str_list,
    require_mapping,
    require_non_empty,
)
from ..core.constants import DEFAULT_JOB_LOCATION
from ..core.enums import ApplicationStatus, EmploymentType, PostingStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..core.permissions import ADMIN_HR, APPLICANTS, Caller, ensure_role
from ..departments.repository import DepartmentRepository
from .model import JobApplication, JobPosting, SalaryRange
from .repository import ApplicationRepository, PostingRepository

logger = logging.getLogger(__name__)


def _parse_salary_range(value: Any, base: SalaryRange = SalaryRange()) -> SalaryRange:
    data = require_mapping(value, "Salary range")
    low = parse_optional_decimal(data["min"], "Minimum salary") if "min" in data else base.min
    high = parse_optional_decimal(data["max"], "Maximum salary") if "max" in data else base.max
    if low is not None and high is not None and low > high:
        raise ValidationError("Minimum salary cannot exceed maximum salary")
    return SalaryRange(min=low, max=high)


class RecruitmentService:
    """Use case: internal job postings and employee applications."""

    def __init__(
        self,
        postings: PostingRepository,
        applications: ApplicationRepository,
        departments: DepartmentRepository,
    ):
        self._postings = postings
        self._applications = applications
        self._departments = departments

    # -- postings -------------------------------------------------------

    def list_active_postings(self) -> Sequence[JobPosting]:
        return self._postings.list(status=PostingStatus.ACTIVE)

    def get_posting(self, posting_id: int) -> JobPosting:
        posting = self._postings.get_by_id(int(posting_id))
        if not posting:
            raise NotFoundError("Job posting not found")
        return posting

    def create_posting(self, caller: Caller, data: Mapping[str, Any]) -> JobPosting:
        ensure_role(caller, ADMIN_HR)
        posted_by = caller.require_employee_id()

        department_id = parse_int(data.get("department_id"), "Department")
        self._require_department(department_id)

        posting = JobPosting(
            posting_id=0,
            title=require_non_empty(data.get("title"), "Title"),
            department_id=department_id,
            description=require_non_empty(data.get("description"), "Description"),
            posted_by=posted_by,
            deadline=coerce_date(data.get("deadline"), "Deadline"),
            requirements=tuple(parse_str_list(data.get("requirements"), "Requirements")),
            responsibilities=tuple(parse_str_list(data.get("responsibilities"), "Responsibilities")),
            salary_range=_parse_salary_range(data.get("salary_range")),
            employment_type=parse_enum(
                EmploymentType, data.get("employment_type", EmploymentType.FULL_TIME.value), "Employment type"
            ),
            location=optional_str(data.get("location")) or DEFAULT_JOB_LOCATION,
            status=parse_enum(PostingStatus, data.get("status", PostingStatus.ACTIVE.value), "Status"),
        )
        posting_id = self._postings.create(posting)
        logger.info("Job posting %s created by employee %s", posting_id, posted_by)
        return self.get_posting(posting_id)

    def update_posting(self, caller: Caller, posting_id: int, data: Mapping[str, Any]) -> JobPosting:
        ensure_role(caller, ADMIN_HR)
        posting = self.get_posting(posting_id)

        department_id = posting.department_id
        if "department_id" in data:
            department_id = parse_int(data["department_id"], "Department")
            self._require_department(department_id)

        updated = replace(
            posting,
            title=require_non_empty(data.get("title", posting.title), "Title"),
            department_id=department_id,
            description=require_non_empty(data.get("description", posting.description), "Description"),
            deadline=coerce_date(data["deadline"], "Deadline") if "deadline" in data else posting.deadline,
            requirements=tuple(parse_str_list(data["requirements"], "Requirements"))
            if "requirements" in data
            else posting.requirements,
            responsibilities=tuple(parse_str_list(data["responsibilities"], "Responsibilities"))
            if "responsibilities" in data
            else posting.responsibilities,
            salary_range=_parse_salary_range(data["salary_range"], posting.salary_range)
            if "salary_range" in data
            else posting.salary_range,
            employment_type=parse_enum(
                EmploymentType, data.get("employment_type", posting.employment_type), "Employment type"
            ),
            location=optional_str(data.get("location", posting.location)) or DEFAULT_JOB_LOCATION,
            status=parse_enum(PostingStatus, data.get("status", posting.status), "Status"),
        )
        if not self._postings.update(updated):
            raise NotFoundError("Job posting not found")
        if updated.status != posting.status:
            logger.info("Job posting %s moved %s -> %s", posting.posting_id, posting.status.value, updated.status.value)
        return self.get_posting(posting.posting_id)

    def delete_posting(self, caller: Caller, posting_id: int) -> None:
        ensure_role(caller, ADMIN_HR)
        if not self._postings.delete(int(posting_id)):
            raise NotFoundError("Job posting not found")
        logger.info("Job posting %s deleted", posting_id)

    # -- applications ---------------------------------------------------

    def apply(self, caller: Caller, job_posting_id: Any, cover_letter: Any) -> JobApplication:
        ensure_role(caller, APPLICANTS)
        applicant_id = caller.require_employee_id()

        posting = self.get_posting(parse_int(job_posting_id, "Job posting"))
        if posting.status != PostingStatus.ACTIVE:
            raise ValidationError("This job posting is no longer accepting applications")

        application = JobApplication(
            application_id=0,
            job_posting_id=posting.posting_id,
            applicant_id=applicant_id,
            cover_letter=require_non_empty(cover_letter, "Cover letter"),
        )
        application_id = self._applications.create_and_count(application)
        logger.info("Employee %s applied to posting %s", applicant_id, posting.posting_id)
        return self._get_application(application_id)

    def list_for_posting(self, caller: Caller, posting_id: int) -> Sequence[JobApplication]:
        ensure_role(caller, ADMIN_HR)
        return self._applications.list(job_posting_id=int(posting_id))

    def list_my_applications(self, caller: Caller) -> Sequence[JobApplication]:
        ensure_role(caller, APPLICANTS)
        return self._applications.list(applicant_id=caller.require_employee_id())

    def update_application_status(
        self,
        caller: Caller,
        application_id: int,
        data: Mapping[str, Any],
        *,
        now: Optional[datetime] = None,
    ) -> JobApplication:
        """Any status may follow any other; the reviewer and time are always recorded."""
        ensure_role(caller, ADMIN_HR)
        reviewer_id = caller.require_employee_id()
        application = self._get_application(application_id)

        status = parse_enum(ApplicationStatus, data.get("status"), "Status")
        ok = self._applications.update_review(
            application_id=application.application_id,
            status=status,
            reviewed_by=reviewer_id,
            reviewed_at=now or now_local(),
            review_comments=optional_str(data["review_comments"])
            if "review_comments" in data
            else application.review_comments,
            interview_date=coerce_optional_datetime(data["interview_date"], "Interview date")
            if "interview_date" in data
            else application.interview_date,
            interview_feedback=optional_str(data["interview_feedback"])
            if "interview_feedback" in data
            else application.interview_feedback,
        )
        if not ok:
            raise NotFoundError("Application not found")
        logger.info(
            "Application %s moved %s -> %s by employee %s",
            application.application_id,
            application.status.value,
            status.value,
            reviewer_id,
        )
        return self._get_application(application.application_id)

    def _get_application(self, application_id: int) -> JobApplication:
        application = self._applications.get_by_id(int(application_id))
        if not application:
            raise NotFoundError("Application not found")
        return application

    def _require_department(self, department_id: int) -> None:
        if not self._departments.get_by_id(department_id):
            raise ValidationError("Department does not exist")
