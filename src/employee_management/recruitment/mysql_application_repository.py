from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import ApplicationStatus, PostingStatus
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, full_name
from .model import JobApplication
from .repository import ApplicationRepository

_SELECT = """
    SELECT a.*, e.first_name, e.last_name, e.employee_code,
           p.title AS job_title, p.status AS job_status
    FROM job_applications a
    LEFT JOIN employees e ON e.employee_id = a.applicant_id
    LEFT JOIN job_postings p ON p.posting_id = a.job_posting_id
"""


def _row_to_application(r: Dict[str, Any]) -> JobApplication:
    return JobApplication(
        application_id=int(r["application_id"]),
        job_posting_id=int(r["job_posting_id"]),
        applicant_id=int(r["applicant_id"]),
        cover_letter=r["cover_letter"],
        status=ApplicationStatus(r["status"]),
        reviewed_by=r.get("reviewed_by"),
        reviewed_at=r.get("reviewed_at"),
        review_comments=r.get("review_comments"),
        interview_date=r.get("interview_date"),
        interview_feedback=r.get("interview_feedback"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        applicant_name=full_name(r.get("first_name"), r.get("last_name")),
        applicant_code=r.get("employee_code"),
        job_title=r.get("job_title"),
        job_status=PostingStatus(r["job_status"]) if r.get("job_status") else None,
    )


class MySQLApplicationRepository(ApplicationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_and_count(self, application: JobApplication) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE job_postings SET applications_count = applications_count + 1
                WHERE posting_id=%s AND status=%s
                """,
                (int(application.job_posting_id), PostingStatus.ACTIVE.value),
            )
            if cur.rowcount == 0:
                # Raising inside db_cursor rolls the transaction back.
                raise NotFoundError("Job posting not found or no longer accepting applications")
            cur.execute(
                """
                INSERT INTO job_applications(job_posting_id, applicant_id, cover_letter, status)
                VALUES(%s,%s,%s,%s)
                """,
                (
                    int(application.job_posting_id),
                    int(application.applicant_id),
                    application.cover_letter,
                    application.status.value,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, application_id: int) -> Optional[JobApplication]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE a.application_id=%s", (int(application_id),))
            row = fetchone(cur)
            return _row_to_application(row) if row else None

    def list(
        self,
        *,
        job_posting_id: Optional[int] = None,
        applicant_id: Optional[int] = None,
    ) -> Sequence[JobApplication]:
        where = []
        params: list[Any] = []
        if job_posting_id is not None:
            where.append("a.job_posting_id=%s")
            params.append(int(job_posting_id))
        if applicant_id is not None:
            where.append("a.applicant_id=%s")
            params.append(int(applicant_id))

        sql = _SELECT
        if where:
            sql += " WHERE " + " AND ".join(where)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY a.created_at DESC, a.application_id DESC", tuple(params))
            return [_row_to_application(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE job_applications
                SET status=%s, reviewed_by=%s, reviewed_at=%s, review_comments=%s,
                    interview_date=%s, interview_feedback=%s
                WHERE application_id=%s
                """,
                (
                    status.value,
                    int(reviewed_by),
                    reviewed_at,
                    review_comments,
                    interview_date,
                    interview_feedback,
                    int(application_id),
                ),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 FROM job_applications WHERE application_id=%s", (int(application_id),))
            return fetchone(cur) is not None
