from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..core.enums import EmploymentType, PostingStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .model import JobPosting, SalaryRange
from .repository import PostingRepository

_SELECT = """
    SELECT p.*, d.name AS department_name
    FROM job_postings p
    LEFT JOIN departments d ON d.department_id = p.department_id
"""


def _opt_dec(value: Any) -> Optional[Decimal]:
    return Decimal(str(value)) if value is not None else None


def _row_to_posting(r: Dict[str, Any]) -> JobPosting:
    return JobPosting(
        posting_id=int(r["posting_id"]),
        title=r["title"],
        department_id=int(r["department_id"]),
        description=r["description"],
        posted_by=int(r["posted_by"]),
        deadline=r["deadline"],
        requirements=tuple(load_json(r.get("requirements"), [])),
        responsibilities=tuple(load_json(r.get("responsibilities"), [])),
        salary_range=SalaryRange(min=_opt_dec(r.get("salary_min")), max=_opt_dec(r.get("salary_max"))),
        employment_type=EmploymentType(r["employment_type"]),
        location=r["location"],
        status=PostingStatus(r["status"]),
        applications_count=int(r.get("applications_count") or 0),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        department_name=r.get("department_name"),
    )


def _columns(p: JobPosting) -> Dict[str, Any]:
    return {
        "title": p.title,
        "department_id": int(p.department_id),
        "description": p.description,
        "requirements": dump_json(list(p.requirements)),
        "responsibilities": dump_json(list(p.responsibilities)),
        "salary_min": p.salary_range.min,
        "salary_max": p.salary_range.max,
        "employment_type": p.employment_type.value,
        "location": p.location,
        "posted_by": int(p.posted_by),
        "deadline": p.deadline,
        "status": p.status.value,
    }


class MySQLPostingRepository(PostingRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list(self, *, status: Optional[PostingStatus] = None) -> Sequence[JobPosting]:
        with db_cursor(self._conn_factory) as (_, cur):
            if status is None:
                cur.execute(_SELECT + " ORDER BY p.created_at DESC, p.posting_id DESC")
            else:
                cur.execute(
                    _SELECT + " WHERE p.status=%s ORDER BY p.created_at DESC, p.posting_id DESC",
                    (status.value,),
                )
            return [_row_to_posting(r) for r in fetchall(cur)]

    def get_by_id(self, posting_id: int) -> Optional[JobPosting]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE p.posting_id=%s", (int(posting_id),))
            row = fetchone(cur)
            return _row_to_posting(row) if row else None

    def create(self, posting: JobPosting) -> int:
        cols = _columns(posting)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO job_postings({','.join(cols)}) VALUES({','.join(['%s'] * len(cols))})",
                tuple(cols.values()),
            )
            return int(cur.lastrowid)

    def update(self, posting: JobPosting) -> bool:
        cols = _columns(posting)
        assignments = ", ".join(f"{c}=%s" for c in cols)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE job_postings SET {assignments} WHERE posting_id=%s",
                tuple(cols.values()) + (int(posting.posting_id),),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 FROM job_postings WHERE posting_id=%s", (int(posting.posting_id),))
            return fetchone(cur) is not None

    def delete(self, posting_id: int) -> bool:
        # job_applications cascade via the foreign key.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM job_postings WHERE posting_id=%s", (int(posting_id),))
            return cur.rowcount > 0
