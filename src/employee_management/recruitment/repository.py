from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ApplicationStatus, PostingStatus
from .model import JobApplication, JobPosting


class PostingRepository(Protocol):
    def list(self, *, status: Optional[PostingStatus] = None) -> Sequence[JobPosting]:
        """Newest first."""

        raise NotImplementedError

    def get_by_id(self, posting_id: int) -> Optional[JobPosting]:
        raise NotImplementedError

    def create(self, posting: JobPosting) -> int:
        raise NotImplementedError

    def update(self, posting: JobPosting) -> bool:
        """Writes everything except applications_count."""

        raise NotImplementedError

    def delete(self, posting_id: int) -> bool:
        """Removes the posting and its applications."""

        raise NotImplementedError


class ApplicationRepository(Protocol):
    def create_and_count(self, application: JobApplication) -> int:
        """Insert the application and bump the posting's counter in one transaction."""

        raise NotImplementedError

    def get_by_id(self, application_id: int) -> Optional[JobApplication]:
        raise NotImplementedError

    def list(
        self,
        *,
        job_posting_id: Optional[int] = None,
        applicant_id: Optional[int] = None,
    ) -> Sequence[JobApplication]:
        raise NotImplementedError

    def update_review(
        self,
        *,
        application_id: int,
        status: ApplicationStatus,
        reviewed_by: int,
        reviewed_at: datetime,
        review_comments: Optional[str],
        interview_date: Optional[datetime],
        interview_feedback: Optional[str],
    ) -> bool:
        raise NotImplementedError
