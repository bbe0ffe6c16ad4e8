from __future__ import annotations

from datetime import date, datetime

import pytest

from employee_management.core.enums import LeaveStatus, LeaveType, Role
from employee_management.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from employee_management.leaves.service import count_leave_days


@pytest.fixture
def people(org):
    dept = org.department()
    pos = org.position(dept)
    return {
        "staff": org.employee(dept, pos, first_name="Sam", role=Role.EMPLOYEE),
        "other": org.employee(dept, pos, first_name="Olga", role=Role.EMPLOYEE),
        "manager": org.employee(dept, pos, first_name="Mona", role=Role.MANAGER),
    }


def _sick(**overrides):
    data = {"leave_type": "sick", "start_date": "2025-03-10", "end_date": "2025-03-12", "reason": "Flu"}
    data.update(overrides)
    return data


@pytest.mark.parametrize(
    "start, end, expected",
    [
        (date(2025, 3, 10), date(2025, 3, 10), 1),
        (date(2025, 3, 10), date(2025, 3, 12), 3),
        (date(2025, 2, 27), date(2025, 3, 2), 4),
    ],
)
def test_count_leave_days_is_inclusive(start, end, expected):
    assert count_leave_days(start, end) == expected


def test_count_leave_days_rejects_reversed_range():
    with pytest.raises(ValidationError):
        count_leave_days(date(2025, 3, 12), date(2025, 3, 10))


def test_create_leave_for_self(container, people):
    leave = container.leave_service.create_leave(people["staff"], _sick())

    assert leave.employee_id == people["staff"].employee_id
    assert leave.leave_type == LeaveType.SICK
    assert leave.days == 3
    assert leave.status == LeaveStatus.PENDING


def test_create_leave_validation(container, people):
    svc = container.leave_service
    with pytest.raises(ValidationError, match="Leave type"):
        svc.create_leave(people["staff"], _sick(leave_type="vacation"))
    with pytest.raises(ValidationError, match="Reason"):
        svc.create_leave(people["staff"], _sick(reason="   "))
    with pytest.raises(ValidationError, match="End date"):
        svc.create_leave(people["staff"], _sick(end_date="2025-03-01"))


def test_filing_for_someone_else_needs_privilege(container, people):
    with pytest.raises(AuthorizationError):
        container.leave_service.create_leave(people["staff"], _sick(), employee_id=people["other"].employee_id)

    leave = container.leave_service.create_leave(people["manager"], _sick(), employee_id=people["other"].employee_id)
    assert leave.employee_id == people["other"].employee_id


def test_decide_records_approver_and_date(container, people):
    leave = container.leave_service.create_leave(people["staff"], _sick())
    decided_at = datetime(2025, 3, 9, 12, 0)

    approved = container.leave_service.decide_leave(
        people["manager"], leave.leave_id, status="approved", comments="Get well", now=decided_at
    )

    assert approved.status == LeaveStatus.APPROVED
    assert approved.approver_id == people["manager"].employee_id
    assert approved.approval_date == decided_at
    assert approved.approval_comments == "Get well"


def test_second_decision_is_rejected(container, people, store):
    leave = container.leave_service.create_leave(people["staff"], _sick())
    container.leave_service.decide_leave(people["manager"], leave.leave_id, status="approved")

    with pytest.raises(ConflictError, match="already been approved"):
        container.leave_service.decide_leave(people["manager"], leave.leave_id, status="rejected")
    assert store.leaves[leave.leave_id].status == LeaveStatus.APPROVED


def test_decide_requires_approver_role_and_valid_status(container, people):
    leave = container.leave_service.create_leave(people["staff"], _sick())
    with pytest.raises(AuthorizationError):
        container.leave_service.decide_leave(people["other"], leave.leave_id, status="approved")
    with pytest.raises(ValidationError):
        container.leave_service.decide_leave(people["manager"], leave.leave_id, status="cancelled")
    with pytest.raises(NotFoundError):
        container.leave_service.decide_leave(people["manager"], 999, status="approved")


def test_update_keeps_days_frozen(container, people):
    leave = container.leave_service.create_leave(people["staff"], _sick())

    updated = container.leave_service.update_leave(
        people["staff"], leave.leave_id, {"end_date": "2025-03-20", "reason": "Still sick"}
    )

    assert updated.end_date == date(2025, 3, 20)
    assert updated.reason == "Still sick"
    assert updated.days == 3


def test_only_owner_edits_and_only_while_pending(container, people):
    leave = container.leave_service.create_leave(people["staff"], _sick())
    with pytest.raises(AuthorizationError):
        container.leave_service.update_leave(people["other"], leave.leave_id, {"reason": "x"})

    container.leave_service.decide_leave(people["manager"], leave.leave_id, status="rejected")
    with pytest.raises(ConflictError):
        container.leave_service.update_leave(people["staff"], leave.leave_id, {"reason": "x"})


def test_cancel_pending_leave(container, people):
    leave = container.leave_service.create_leave(people["staff"], _sick())
    cancelled = container.leave_service.cancel_leave(people["staff"], leave.leave_id)
    assert cancelled.status == LeaveStatus.CANCELLED

    with pytest.raises(ConflictError):
        container.leave_service.cancel_leave(people["staff"], leave.leave_id)


def test_visibility(container, people):
    mine = container.leave_service.create_leave(people["staff"], _sick())
    container.leave_service.create_leave(people["other"], _sick())

    assert [l.leave_id for l in container.leave_service.list_my_leaves(people["staff"])] == [mine.leave_id]
    assert len(container.leave_service.list_all(people["manager"])) == 2
    assert len(container.leave_service.list_all(people["manager"], status="approved")) == 0

    with pytest.raises(AuthorizationError):
        container.leave_service.get_leave(people["other"], mine.leave_id)
    with pytest.raises(AuthorizationError):
        container.leave_service.list_all(people["staff"])
    assert container.leave_service.get_leave(people["manager"], mine.leave_id).leave_id == mine.leave_id
