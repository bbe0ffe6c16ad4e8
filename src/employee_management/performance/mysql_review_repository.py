from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import coerce_optional_date
from ..core.enums import GoalStatus, ReviewStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, full_name, load_json
from .model import Feedback, Goal, PerformanceReview, Ratings, ReviewPeriod
from .repository import ReviewRepository

_SELECT = """
    SELECT r.*,
           e.first_name AS employee_first_name, e.last_name AS employee_last_name, e.employee_code,
           v.first_name AS reviewer_first_name, v.last_name AS reviewer_last_name
    FROM performance_reviews r
    LEFT JOIN employees e ON e.employee_id = r.employee_id
    LEFT JOIN employees v ON v.employee_id = r.reviewer_id
"""


def _row_to_review(r: Dict[str, Any]) -> PerformanceReview:
    ratings = Ratings(**{n: r.get(f"rating_{n}") for n in Ratings.names()})
    goals = tuple(
        Goal(
            title=g.get("title", ""),
            description=g.get("description"),
            target_date=coerce_optional_date(g.get("target_date"), "Target date"),
            status=GoalStatus(g.get("status", GoalStatus.PENDING.value)),
            weight=g.get("weight", 1),
        )
        for g in load_json(r.get("goals"), [])
    )
    return PerformanceReview(
        review_id=int(r["review_id"]),
        employee_id=int(r["employee_id"]),
        reviewer_id=int(r["reviewer_id"]),
        period=ReviewPeriod(start_date=r["period_start"], end_date=r["period_end"]),
        ratings=ratings,
        overall_rating=float(r["overall_rating"]) if r.get("overall_rating") is not None else None,
        goals=goals,
        feedback=Feedback(
            strengths=r.get("strengths"),
            improvements=r.get("improvements"),
            comments=r.get("comments"),
        ),
        status=ReviewStatus(r["status"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        employee_name=full_name(r.get("employee_first_name"), r.get("employee_last_name")),
        employee_code=r.get("employee_code"),
        reviewer_name=full_name(r.get("reviewer_first_name"), r.get("reviewer_last_name")),
    )


def _columns(review: PerformanceReview) -> Dict[str, Any]:
    cols: Dict[str, Any] = {
        "employee_id": int(review.employee_id),
        "reviewer_id": int(review.reviewer_id),
        "period_start": review.period.start_date,
        "period_end": review.period.end_date,
        "goals": dump_json(
            [
                {
                    "title": g.title,
                    "description": g.description,
                    "target_date": g.target_date.isoformat() if g.target_date else None,
                    "status": g.status.value,
                    "weight": g.weight,
                }
                for g in review.goals
            ]
        ),
        "overall_rating": review.overall_rating,
        "strengths": review.feedback.strengths,
        "improvements": review.feedback.improvements,
        "comments": review.feedback.comments,
        "status": review.status.value,
    }
    for name in Ratings.names():
        cols[f"rating_{name}"] = getattr(review.ratings, name)
    return cols


class MySQLReviewRepository(ReviewRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, review: PerformanceReview) -> int:
        cols = _columns(review)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO performance_reviews({','.join(cols)}) VALUES({','.join(['%s'] * len(cols))})",
                tuple(cols.values()),
            )
            return int(cur.lastrowid)

    def update(self, review: PerformanceReview) -> bool:
        cols = _columns(review)
        assignments = ", ".join(f"{c}=%s" for c in cols)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE performance_reviews SET {assignments} WHERE review_id=%s",
                tuple(cols.values()) + (int(review.review_id),),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 FROM performance_reviews WHERE review_id=%s", (int(review.review_id),))
            return fetchone(cur) is not None

    def get_by_id(self, review_id: int) -> Optional[PerformanceReview]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE r.review_id=%s", (int(review_id),))
            row = fetchone(cur)
            return _row_to_review(row) if row else None

    def list(self, *, employee_id: Optional[int] = None) -> Sequence[PerformanceReview]:
        with db_cursor(self._conn_factory) as (_, cur):
            if employee_id is None:
                cur.execute(_SELECT + " ORDER BY r.created_at DESC, r.review_id DESC")
            else:
                cur.execute(
                    _SELECT + " WHERE r.employee_id=%s ORDER BY r.created_at DESC, r.review_id DESC",
                    (int(employee_id),),
                )
            return [_row_to_review(r) for r in fetchall(cur)]

    def delete(self, review_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM performance_reviews WHERE review_id=%s", (int(review_id),))
            return cur.rowcount > 0
