from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import coerce_date, now_local
from ..common.validators import optional_str, parse_enum, require_non_empty
from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..core.permissions import LEAVE_APPROVERS, Caller, ensure_role
from ..employees.repository import EmployeeRepository
from .model import LeaveDocument, LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)

DECISIONS = frozenset({LeaveStatus.APPROVED, LeaveStatus.REJECTED})


def count_leave_days(start_date: date, end_date: date) -> int:
    """Inclusive day span: the same start and end date counts as one day."""
    if end_date < start_date:
        raise ValidationError("End date must be on or after start date")
    return (end_date - start_date).days + 1


def _parse_documents(value: Any) -> tuple[LeaveDocument, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ValidationError("Documents must be a list")
    docs = []
    for item in value:
        if not isinstance(item, dict) or not item.get("url"):
            raise ValidationError("Each document needs a url")
        docs.append(LeaveDocument(name=str(item.get("name") or item["url"]), url=str(item["url"])))
    return tuple(docs)


class LeaveService:
    """Use case: leave requests (self-service) and their approval flow."""

    def __init__(self, leaves: LeaveRepository, employees: EmployeeRepository):
        self._leaves = leaves
        self._employees = employees

    def create_leave(
        self,
        caller: Caller,
        data: Mapping[str, Any],
        *,
        employee_id: Optional[int] = None,
    ) -> LeaveRequest:
        if employee_id is not None and employee_id != caller.employee_id:
            # Filing on someone else's behalf is a privileged action.
            ensure_role(caller, LEAVE_APPROVERS)
            if not self._employees.get_by_id(int(employee_id)):
                raise ValidationError("Employee does not exist")
            owner_id = int(employee_id)
        else:
            owner_id = caller.require_employee_id()

        leave_type = parse_enum(LeaveType, data.get("leave_type"), "Leave type")
        start_date = coerce_date(data.get("start_date"), "Start date")
        end_date = coerce_date(data.get("end_date"), "End date")
        reason = require_non_empty(data.get("reason"), "Reason")

        leave = LeaveRequest(
            leave_id=0,
            employee_id=owner_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            days=count_leave_days(start_date, end_date),
            reason=reason,
            documents=_parse_documents(data.get("documents")),
        )
        leave_id = self._leaves.create(leave)
        logger.info("Leave %s filed for employee %s (%s days)", leave_id, owner_id, leave.days)
        return self._get(leave_id)

    def update_leave(self, caller: Caller, leave_id: int, data: Mapping[str, Any]) -> LeaveRequest:
        leave = self._get(leave_id)
        if leave.employee_id != caller.employee_id:
            raise AuthorizationError("You can only edit your own leave requests")
        if leave.status != LeaveStatus.PENDING:
            raise ConflictError("Only pending leave requests can be edited")

        start_date = coerce_date(data["start_date"], "Start date") if "start_date" in data else leave.start_date
        end_date = coerce_date(data["end_date"], "End date") if "end_date" in data else leave.end_date
        if end_date < start_date:
            raise ValidationError("End date must be on or after start date")

        updated = replace(
            leave,
            leave_type=parse_enum(LeaveType, data.get("leave_type", leave.leave_type), "Leave type"),
            start_date=start_date,
            end_date=end_date,
            reason=require_non_empty(data.get("reason", leave.reason), "Reason"),
            documents=_parse_documents(data["documents"]) if "documents" in data else leave.documents,
        )
        if not self._leaves.update_details(updated):
            raise ConflictError("Only pending leave requests can be edited")
        return self._get(leave.leave_id)

    def decide_leave(
        self,
        caller: Caller,
        leave_id: int,
        *,
        status: Any,
        comments: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> LeaveRequest:
        ensure_role(caller, LEAVE_APPROVERS)
        approver_id = caller.require_employee_id()

        decision = parse_enum(LeaveStatus, status, "Status")
        if decision not in DECISIONS:
            raise ValidationError("Status must be approved or rejected")

        leave = self._get(leave_id)
        if leave.status != LeaveStatus.PENDING:
            raise ConflictError(f"Leave request has already been {leave.status.value}")

        ok = self._leaves.decide(
            leave_id=leave.leave_id,
            status=decision,
            approver_id=approver_id,
            decided_at=now or now_local(),
            comments=optional_str(comments),
        )
        if not ok:
            # Another approver got there between the read and the conditional write.
            raise ConflictError("Leave request has already been decided")

        logger.info("Leave %s %s by employee %s", leave.leave_id, decision.value, approver_id)
        return self._get(leave.leave_id)

    def cancel_leave(self, caller: Caller, leave_id: int) -> LeaveRequest:
        leave = self._get(leave_id)
        if leave.employee_id != caller.employee_id:
            raise AuthorizationError("You can only cancel your own leave requests")
        if not self._leaves.cancel(leave_id=leave.leave_id):
            raise ConflictError("Only pending leave requests can be cancelled")
        return self._get(leave.leave_id)

    def get_leave(self, caller: Caller, leave_id: int) -> LeaveRequest:
        leave = self._get(leave_id)
        if leave.employee_id != caller.employee_id and caller.role not in LEAVE_APPROVERS:
            raise AuthorizationError("Access denied")
        return leave

    def list_my_leaves(self, caller: Caller) -> Sequence[LeaveRequest]:
        return self._leaves.list(employee_id=caller.require_employee_id())

    def list_all(self, caller: Caller, *, status: Optional[str] = None) -> Sequence[LeaveRequest]:
        ensure_role(caller, LEAVE_APPROVERS)
        status_filter = parse_enum(LeaveStatus, status, "Status") if status else None
        return self._leaves.list(status=status_filter)

    def list_for_employee(self, caller: Caller, employee_id: int) -> Sequence[LeaveRequest]:
        ensure_role(caller, LEAVE_APPROVERS)
        return self._leaves.list(employee_id=int(employee_id))

    def _get(self, leave_id: int) -> LeaveRequest:
        leave = self._leaves.get_by_id(int(leave_id))
        if not leave:
            raise NotFoundError("Leave request not found")
        return leave
