from __future__ import annotations

from datetime import date

import pytest

from employee_management.core.enums import GoalStatus, ReviewStatus, Role
from employee_management.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from employee_management.performance.model import Ratings
from employee_management.performance.service import compute_overall_rating


@pytest.fixture
def team(org):
    eng = org.department("Engineering")
    sales = org.department("Sales")
    pos = org.position(eng)
    return {
        "head": org.employee(eng, pos, first_name="Hedy", role=Role.DEPARTMENT_HEAD),
        "dev": org.employee(eng, pos, first_name="Dev", role=Role.EMPLOYEE),
        "ops": org.employee(eng, pos, first_name="Ops", role=Role.EMPLOYEE),
        "seller": org.employee(sales, pos, first_name="Sel", role=Role.EMPLOYEE),
        "hr": org.employee(sales, pos, first_name="Hank", role=Role.HR),
    }


def _review(team, **overrides):
    data = {
        "employee_id": team["dev"].employee_id,
        "period": {"start_date": "2025-01-01", "end_date": "2025-03-31"},
        "ratings": {"technical": 5, "communication": 4, "teamwork": 3},
        "goals": [{"title": "Ship v2", "target_date": "2025-06-30"}],
        "feedback": {"strengths": "Focus"},
    }
    data.update(overrides)
    return data


def test_overall_rating_is_mean_of_present_ratings():
    assert compute_overall_rating(Ratings(technical=5, communication=4, teamwork=3)) == 4
    assert compute_overall_rating(Ratings(technical=5, communication=4)) == 4.5
    assert compute_overall_rating(Ratings(1, 2, 3, 4, 5)) == 3


def test_overall_rating_keeps_previous_when_nothing_rated():
    assert compute_overall_rating(Ratings(), previous=3.5) == 3.5
    assert compute_overall_rating(Ratings()) is None


def test_create_review(container, team):
    review = container.performance_service.create_review(team["head"], _review(team))

    assert review.reviewer_id == team["head"].employee_id
    assert review.period.start_date == date(2025, 1, 1)
    assert review.overall_rating == 4
    assert review.status == ReviewStatus.DRAFT
    assert review.goals[0].status == GoalStatus.PENDING
    assert review.goals[0].weight == 1
    assert review.feedback.strengths == "Focus"


@pytest.mark.parametrize(
    "override, message",
    [
        ({"ratings": {"technical": 6}}, "between 1 and 5"),
        ({"ratings": {"technical": 0}}, "between 1 and 5"),
        ({"ratings": {"technical": 4.5}}, "must be an integer"),
        ({"ratings": {"charisma": 3}}, "Unknown rating"),
        ({"employee_id": 999}, "Employee does not exist"),
        ({"period": {"start_date": "2025-03-31", "end_date": "2025-01-01"}}, "end date"),
        ({"goals": [{"description": "no title"}]}, "Goal title"),
    ],
)
def test_create_review_validation(container, team, override, message):
    with pytest.raises(ValidationError, match=message):
        container.performance_service.create_review(team["head"], _review(team, **override))


def test_employees_cannot_write_reviews(container, team):
    with pytest.raises(AuthorizationError):
        container.performance_service.create_review(team["ops"], _review(team))


def test_update_merges_ratings_and_ignores_client_overall(container, team):
    review = container.performance_service.create_review(team["head"], _review(team))

    updated = container.performance_service.update_review(
        team["head"],
        review.review_id,
        {"ratings": {"leadership": 2}, "overall_rating": 5, "status": "submitted"},
    )

    assert updated.ratings == Ratings(technical=5, communication=4, teamwork=3, leadership=2)
    assert updated.overall_rating == 3.5
    assert updated.status == ReviewStatus.SUBMITTED


def test_clearing_all_ratings_keeps_previous_overall(container, team):
    review = container.performance_service.create_review(team["head"], _review(team))
    cleared = {"technical": None, "communication": None, "teamwork": None}

    updated = container.performance_service.update_review(team["head"], review.review_id, {"ratings": cleared})

    assert updated.ratings == Ratings()
    assert updated.overall_rating == 4


def test_review_visibility(container, team):
    review = container.performance_service.create_review(team["head"], _review(team))

    assert container.performance_service.get_review(team["dev"], review.review_id).review_id == review.review_id
    with pytest.raises(AuthorizationError):
        container.performance_service.get_review(team["ops"], review.review_id)
    with pytest.raises(AuthorizationError):
        container.performance_service.list_reviews(team["dev"])
    assert len(container.performance_service.list_for_employee(team["hr"], team["dev"].employee_id)) == 1


def test_delete_review(container, team):
    review = container.performance_service.create_review(team["head"], _review(team))
    container.performance_service.delete_review(team["hr"], review.review_id)

    with pytest.raises(NotFoundError):
        container.performance_service.get_review(team["hr"], review.review_id)


def test_reviewable_employees_are_own_department_without_self(container, team):
    names = [e.first_name for e in container.performance_service.list_reviewable_employees(team["head"])]
    assert names == ["Dev", "Ops"]

    with pytest.raises(AuthorizationError):
        container.performance_service.list_reviewable_employees(team["hr"])
