from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import coerce_date, coerce_optional_date
from ..common.validators import optional_str, parse_enum, parse_optional_int, require_mapping, require_non_empty
from ..core.constants import RATING_MAX, RATING_MIN
from ..core.enums import GoalStatus, ReviewStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..core.permissions import REVIEWERS, TEAM_LEADS, Caller, ensure_role
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import Feedback, Goal, PerformanceReview, Ratings, ReviewPeriod
from .repository import ReviewRepository

logger = logging.getLogger(__name__)


def compute_overall_rating(ratings: Ratings, previous: Optional[float] = None) -> Optional[float]:
    """Arithmetic mean of the ratings that are set; `previous` when none are."""
    present = ratings.present()
    if not present:
        return previous
    return sum(present) / len(present)


def _parse_rating(value: Any, name: str) -> Optional[int]:
    rating = parse_optional_int(value, f"Rating '{name}'")
    if rating is not None and not RATING_MIN <= rating <= RATING_MAX:
        raise ValidationError(f"Rating '{name}' must be between {RATING_MIN} and {RATING_MAX}")
    return rating


def _parse_ratings(value: Any, base: Ratings = Ratings()) -> Ratings:
    """Merge a partial ratings object onto `base`; an explicit null clears a rating."""
    data = require_mapping(value, "Ratings")
    unknown = set(data) - set(Ratings.names())
    if unknown:
        raise ValidationError(f"Unknown rating: {', '.join(sorted(unknown))}")
    return replace(base, **{name: _parse_rating(data[name], name) for name in data})


def _parse_period(value: Any, base: Optional[ReviewPeriod] = None) -> ReviewPeriod:
    data = require_mapping(value, "Review period")
    if base is None:
        start = coerce_date(data.get("start_date"), "Review period start date")
        end = coerce_date(data.get("end_date"), "Review period end date")
    else:
        start = coerce_date(data["start_date"], "Review period start date") if "start_date" in data else base.start_date
        end = coerce_date(data["end_date"], "Review period end date") if "end_date" in data else base.end_date
    if end < start:
        raise ValidationError("Review period end date must be on or after its start date")
    return ReviewPeriod(start_date=start, end_date=end)


def _parse_goals(value: Any) -> tuple[Goal, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ValidationError("Goals must be a list")
    goals = []
    for item in value:
        item = require_mapping(item, "Goal")
        weight = item.get("weight", 1)
        if isinstance(weight, bool) or not isinstance(weight, (int, float)) or weight < 0:
            raise ValidationError("Goal weight must be a non-negative number")
        goals.append(
            Goal(
                title=require_non_empty(item.get("title"), "Goal title"),
                description=optional_str(item.get("description")),
                target_date=coerce_optional_date(item.get("target_date"), "Goal target date"),
                status=parse_enum(GoalStatus, item.get("status", GoalStatus.PENDING.value), "Goal status"),
                weight=weight,
            )
        )
    return tuple(goals)


def _parse_feedback(value: Any, base: Feedback = Feedback()) -> Feedback:
    data = require_mapping(value, "Feedback")
    return Feedback(
        strengths=optional_str(data["strengths"]) if "strengths" in data else base.strengths,
        improvements=optional_str(data["improvements"]) if "improvements" in data else base.improvements,
        comments=optional_str(data["comments"]) if "comments" in data else base.comments,
    )


class PerformanceService:
    """Use case: performance reviews written by managers, department heads and HR."""

    def __init__(self, reviews: ReviewRepository, employees: EmployeeRepository):
        self._reviews = reviews
        self._employees = employees

    def create_review(self, caller: Caller, data: Mapping[str, Any]) -> PerformanceReview:
        ensure_role(caller, REVIEWERS)
        reviewer_id = caller.require_employee_id()

        employee_id = parse_optional_int(data.get("employee_id"), "Employee")
        if employee_id is None:
            raise ValidationError("Employee is required")
        if not self._employees.get_by_id(employee_id):
            raise ValidationError("Employee does not exist")

        ratings = _parse_ratings(data.get("ratings"))
        review = PerformanceReview(
            review_id=0,
            employee_id=employee_id,
            reviewer_id=reviewer_id,
            period=_parse_period(data.get("period")),
            ratings=ratings,
            overall_rating=compute_overall_rating(ratings),
            goals=_parse_goals(data.get("goals")),
            feedback=_parse_feedback(data.get("feedback")),
            status=parse_enum(ReviewStatus, data.get("status", ReviewStatus.DRAFT.value), "Status"),
        )
        review_id = self._reviews.create(review)
        logger.info("Review %s created for employee %s by %s", review_id, employee_id, reviewer_id)
        return self._get(review_id)

    def update_review(self, caller: Caller, review_id: int, data: Mapping[str, Any]) -> PerformanceReview:
        ensure_role(caller, REVIEWERS)
        review = self._get(review_id)

        # overall_rating is always derived; a client-supplied value is ignored.
        ratings = _parse_ratings(data["ratings"], review.ratings) if "ratings" in data else review.ratings
        updated = replace(
            review,
            period=_parse_period(data["period"], review.period) if "period" in data else review.period,
            ratings=ratings,
            overall_rating=compute_overall_rating(ratings, review.overall_rating),
            goals=_parse_goals(data["goals"]) if "goals" in data else review.goals,
            feedback=_parse_feedback(data["feedback"], review.feedback) if "feedback" in data else review.feedback,
            status=parse_enum(ReviewStatus, data.get("status", review.status), "Status"),
        )
        if not self._reviews.update(updated):
            raise NotFoundError("Performance review not found")
        if updated.status != review.status:
            logger.info("Review %s moved %s -> %s", review.review_id, review.status.value, updated.status.value)
        return self._get(review.review_id)

    def get_review(self, caller: Caller, review_id: int) -> PerformanceReview:
        review = self._get(review_id)
        if caller.role not in REVIEWERS and review.employee_id != caller.employee_id:
            raise AuthorizationError("Access denied")
        return review

    def list_reviews(self, caller: Caller) -> Sequence[PerformanceReview]:
        ensure_role(caller, REVIEWERS)
        return self._reviews.list()

    def list_for_employee(self, caller: Caller, employee_id: int) -> Sequence[PerformanceReview]:
        if caller.role not in REVIEWERS and int(employee_id) != caller.employee_id:
            raise AuthorizationError("Access denied")
        return self._reviews.list(employee_id=int(employee_id))

    def delete_review(self, caller: Caller, review_id: int) -> None:
        ensure_role(caller, REVIEWERS)
        if not self._reviews.delete(int(review_id)):
            raise NotFoundError("Performance review not found")
        logger.info("Review %s deleted", review_id)

    def list_reviewable_employees(self, caller: Caller) -> Sequence[Employee]:
        """Members of the caller's own department, excluding the caller."""
        ensure_role(caller, TEAM_LEADS)
        me = self._employees.get_by_id(caller.require_employee_id())
        if not me:
            raise NotFoundError("Employee profile not found")
        return [e for e in self._employees.list_by_department(me.department_id) if e.employee_id != me.employee_id]

    def _get(self, review_id: int) -> PerformanceReview:
        review = self._reviews.get_by_id(int(review_id))
        if not review:
            raise NotFoundError("Performance review not found")
        return review
