from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.constants import DEFAULT_JOB_LOCATION
from ..core.enums import ApplicationStatus, EmploymentType, PostingStatus


@dataclass(frozen=True)
class SalaryRange:
    min: Optional[Decimal] = None
    max: Optional[Decimal] = None


@dataclass(frozen=True)
class JobPosting:
    posting_id: int
    title: str
    department_id: int
    description: str
    posted_by: int
    deadline: date
    requirements: tuple[str, ...] = ()
    responsibilities: tuple[str, ...] = ()
    salary_range: SalaryRange = SalaryRange()
    employment_type: EmploymentType = EmploymentType.FULL_TIME
    location: str = DEFAULT_JOB_LOCATION
    status: PostingStatus = PostingStatus.ACTIVE
    applications_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    department_name: Optional[str] = None


@dataclass(frozen=True)
class JobApplication:
    application_id: int
    job_posting_id: int
    applicant_id: int
    cover_letter: str
    status: ApplicationStatus = ApplicationStatus.APPLIED
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    review_comments: Optional[str] = None
    interview_date: Optional[datetime] = None
    interview_feedback: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    applicant_name: Optional[str] = None
    applicant_code: Optional[str] = None
    job_title: Optional[str] = None
    job_status: Optional[PostingStatus] = None
