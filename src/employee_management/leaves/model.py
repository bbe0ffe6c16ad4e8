from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class LeaveDocument:
    name: str
    url: str


@dataclass(frozen=True)
class LeaveRequest:
    """Domain entity: time-off request owned by an employee.

    `days` is fixed when the request is created; later edits keep it.
    """

    leave_id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    days: int
    reason: str
    status: LeaveStatus = LeaveStatus.PENDING
    approver_id: Optional[int] = None
    approval_date: Optional[datetime] = None
    approval_comments: Optional[str] = None
    documents: tuple[LeaveDocument, ...] = ()
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    employee_name: Optional[str] = None
    employee_code: Optional[str] = None
    approver_name: Optional[str] = None
