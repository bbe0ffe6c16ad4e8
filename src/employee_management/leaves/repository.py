from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def create(self, leave: LeaveRequest) -> int:
        raise NotImplementedError

    def get_by_id(self, leave_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
    ) -> Sequence[LeaveRequest]:
        """Newest first, with employee/approver names joined in."""

        raise NotImplementedError

    def update_details(self, leave: LeaveRequest) -> bool:
        """Rewrite type, dates, reason and documents of a pending request. `days` is left as stored."""

        raise NotImplementedError

    def decide(
        self,
        *,
        leave_id: int,
        status: LeaveStatus,
        approver_id: int,
        decided_at: datetime,
        comments: Optional[str] = None,
    ) -> bool:
        """Apply a decision only if the request is still pending."""

        raise NotImplementedError

    def cancel(self, *, leave_id: int) -> bool:
        raise NotImplementedError
