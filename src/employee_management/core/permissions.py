"""Per-operation role allow-lists and the explicit caller value."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .enums import Role
from .exceptions import AuthorizationError, ValidationError


@dataclass(frozen=True)
class Caller:
    """Who is performing an operation. Passed explicitly into every service call."""

    identity_id: int
    role: Role
    employee_id: Optional[int]

    def require_employee_id(self) -> int:
        if self.employee_id is None:
            raise ValidationError("Your account is not linked to an employee profile")
        return self.employee_id


ADMIN_ONLY = frozenset({Role.ADMIN})
ADMIN_HR = frozenset({Role.ADMIN, Role.HR})
LEAVE_APPROVERS = frozenset({Role.ADMIN, Role.HR, Role.MANAGER, Role.DEPARTMENT_HEAD})
REVIEWERS = frozenset({Role.ADMIN, Role.HR, Role.MANAGER, Role.DEPARTMENT_HEAD})
TEAM_LEADS = frozenset({Role.MANAGER, Role.DEPARTMENT_HEAD})
APPLICANTS = frozenset({Role.EMPLOYEE})


def ensure_role(caller: Caller, allowed: Iterable[Role]) -> None:
    if caller.role not in allowed:
        raise AuthorizationError("Access denied")
