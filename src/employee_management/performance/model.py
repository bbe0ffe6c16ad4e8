from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date, datetime
from typing import Optional

from ..core.enums import GoalStatus, ReviewStatus


@dataclass(frozen=True)
class Ratings:
    """The fixed set of named ratings, each 1-5 or unset."""

    technical: Optional[int] = None
    communication: Optional[int] = None
    teamwork: Optional[int] = None
    leadership: Optional[int] = None
    innovation: Optional[int] = None

    @classmethod
    def names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def present(self) -> list[int]:
        return [v for v in (getattr(self, n) for n in self.names()) if v is not None]


@dataclass(frozen=True)
class ReviewPeriod:
    start_date: date
    end_date: date


@dataclass(frozen=True)
class Goal:
    title: str
    description: Optional[str] = None
    target_date: Optional[date] = None
    status: GoalStatus = GoalStatus.PENDING
    weight: float = 1


@dataclass(frozen=True)
class Feedback:
    strengths: Optional[str] = None
    improvements: Optional[str] = None
    comments: Optional[str] = None


@dataclass(frozen=True)
class PerformanceReview:
    """Domain entity: periodic evaluation of an employee by a reviewer.

    `overall_rating` is derived from `ratings` on every save.
    """

    review_id: int
    employee_id: int
    reviewer_id: int
    period: ReviewPeriod
    ratings: Ratings = Ratings()
    overall_rating: Optional[float] = None
    goals: tuple[Goal, ...] = ()
    feedback: Feedback = Feedback()
    status: ReviewStatus = ReviewStatus.DRAFT
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    employee_name: Optional[str] = None
    employee_code: Optional[str] = None
    reviewer_name: Optional[str] = None
